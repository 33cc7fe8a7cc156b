"""
Parser for markdown slide decks

Transforms the lines of a markdown document into a Deck of Slides.

The parser operates in two phases:
1. Splitting: '#'-prefixed lines start a new slide; every other line is
   appended verbatim to the body of the slide being built
2. Extraction: fenced code regions (```lang ... ```) in each slide body
   are captured as Blocks

Key features:
- Leading content before the first heading becomes an untitled slide
- Fence lines stay in the slide body (they are displayed); blocks are an
  additional, structured view of the same lines
- Unterminated fences are silently dropped, never reported

Example:
    >>> deck = Parser(["# One", "hello", "# Two", "```python", "print(1)", "```"]).parse()
    >>> len(deck)
    2
    >>> deck.slides[1].blocks[0].body
    'print(1)'
"""

from typing import Iterable, List, Optional

from ..config import AppSettings, appsettings
from ..models.slides import Block, Deck, Slide
from .log import LOG


class Parser:
    """
    Parser for '#'-separated markdown slides

    Handles:
    - Slide splitting on heading lines
    - Preamble content before the first heading
    - Fenced code block extraction with optional language tag
    """

    def __init__(
        self,
        lines: Iterable[str],
        debug: bool = False,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Initialize parser with source lines

        Args:
            lines: Raw document lines, without trailing newlines
            debug: Log every slide as it is pushed (also on with settings.debug_mode)
            settings: Separator/fence configuration (defaults to appsettings)

        Attributes:
            lines: Source lines being parsed
            debug: Debug mode flag
            settings: Active configuration
            deck: Deck accumulated by the last parse()
        """
        self.lines: List[str] = list(lines)
        self.settings = settings or appsettings
        self.debug = debug or self.settings.debug_mode
        self.deck = Deck()

    def parse(self) -> Deck:
        """
        Parse source lines into a Deck

        Main entry point. Splits lines into slides, then extracts the
        fenced code blocks of every slide.

        Returns:
            Deck with at least one slide. An empty document yields a single
            slide with empty title and empty body.

        Example:
            >>> deck = Parser([]).parse()
            >>> len(deck), deck.slides[0].title, deck.slides[0].body
            (1, '', [])
        """
        self.deck = Deck(slides=self.slides_split())

        for slide in self.deck.slides:
            slide.blocks = self.blocks_extract(slide.body)

        block_count = sum(len(slide.blocks) for slide in self.deck.slides)
        LOG(f"Parsed {len(self.deck)} slides, {block_count} code blocks", level=2)
        return self.deck

    def separator_is(self, line: str) -> bool:
        """Check whether a line starts a new slide"""
        return line.startswith(self.settings.separator_prefix)

    def slides_split(self) -> List[Slide]:
        """
        Split source lines into slides on separator lines

        The slide being built is pushed when the next separator arrives.
        Before the first heading the slide being built is untitled: if it
        collected lines it is pushed as an untitled preamble slide,
        otherwise the heading simply becomes its title. Whatever is being
        built at end of input is always pushed.

        Returns:
            Slides in document order, blocks not yet extracted

        Example:
            Input: ["intro", "# A", "a1", "# B"]
            Output: [Slide(title="", body=["intro"]),
                     Slide(title="# A", body=["a1"]),
                     Slide(title="# B", body=[])]
        """
        slides: List[Slide] = []
        current = Slide()

        for line in self.lines:
            if self.separator_is(line):
                if current.title:
                    self.slide_push(slides, current)
                    current = Slide(title=line)
                elif current.body:
                    # Preamble before the first heading is its own slide
                    self.slide_push(slides, current)
                    current = Slide(title=line)
                else:
                    current.title = line
            else:
                current.body.append(line)

        self.slide_push(slides, current)
        return slides

    def slide_push(self, slides: List[Slide], slide: Slide) -> None:
        slides.append(slide)
        if self.debug:
            LOG(f"Slide {len(slides)}: {slide.title!r} ({len(slide.body)} lines)", level=3)

    def blocks_extract(self, body: List[str]) -> List[Block]:
        """
        Extract closed fenced code blocks from slide body lines

        A line starting with the fence marker opens a block (the rest of the
        line is its language tag); the next fence line closes it. Only the
        lines in between are captured, each followed by a newline, and the
        result is trimmed of surrounding whitespace.

        Args:
            body: Slide body lines

        Returns:
            One Block per closed fence pair. A fence left open at the end of
            the body contributes nothing.

        Example:
            Input: ["```python", "", "  print(1)  ", "```", "```sh", "ls"]
            Output: [Block(language="python", body="print(1)")]
        """
        blocks: List[Block] = []
        language: Optional[str] = None
        accumulated: List[str] = []

        for line in body:
            if self.settings.fence_is(line):
                if language is None:
                    language = self.settings.language_extract(line)
                    accumulated = []
                else:
                    blocks.append(Block(language=language, body="".join(accumulated).strip()))
                    language = None
                    accumulated = []
            elif language is not None:
                accumulated.append(line + "\n")

        if language is not None and self.debug:
            LOG(f"Dropping unterminated ```{language} block", level=3)

        return blocks


def parse(lines: Iterable[str], settings: Optional[AppSettings] = None) -> Deck:
    """
    Parse markdown lines into a Deck

    Convenience wrapper around Parser(lines).parse().
    """
    return Parser(lines, settings=settings).parse()
