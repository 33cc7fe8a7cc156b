"""
Slide deck data models

Type-safe structures produced by the Parser and consumed by the Session.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Block:
    """
    One fenced code region inside a slide body

    Created once by Parser.blocks_extract() and never mutated afterwards.

    Attributes:
        language: Tag following the opening fence (e.g. "python"), or ""
        body: Source between the fences, trimmed of surrounding whitespace

    Example:
        For the lines "```python", "  print(1)  ", "```":
        Block(language="python", body="print(1)")
    """
    language: str
    body: str


@dataclass
class Slide:
    """
    One presentation unit: a title line, raw body lines and extracted blocks

    Attributes:
        title: The raw separator line including its leading markers
               (e.g. "# Intro"), or "" for a preamble slide that precedes
               the first heading
        body: Raw lines following the title, verbatim and in order
              (fence lines included, title excluded)
        blocks: Closed fenced code regions found in the body, in order
    """
    title: str = ""
    body: List[str] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)

    def block_first(self) -> Optional[Block]:
        """Return the first code block on this slide, if any"""
        return self.blocks[0] if self.blocks else None


@dataclass
class Deck:
    """
    The full ordered collection of slides parsed from one document

    Never empty once produced by the Parser: even an empty document
    yields a single slide with an empty title.
    """
    slides: List[Slide] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.slides)

    def slide_get(self, index: int) -> Slide:
        """
        Get a slide by its 1-based position

        Args:
            index: Slide number, 1 for the first slide

        Raises:
            IndexError: If index is outside [1, len(deck)]
        """
        if index < 1 or index > len(self.slides):
            raise IndexError(f"Slide {index} out of range 1..{len(self.slides)}")
        return self.slides[index - 1]
