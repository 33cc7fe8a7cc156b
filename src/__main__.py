#!/usr/bin/env python3
"""
present - Markdown slide presenter

Presents a markdown file as full-screen slides in the terminal.

Philosophy:
    - Plain markdown: every '#' heading starts a new slide
    - Live code: the first fenced block on a slide can be run in place,
      its output appended under a "# Code" section
    - Nothing to install per talk: one .md file is the whole presentation

Keys:
    n  next slide          p  previous slide
    X  run the slide's first code block
    q  quit

Usage:
    present talk.md

Examples:
    # Present
    present slides.md

    # Print an outline of the deck instead of presenting
    present slides.md --dump

    # Verbose logging into a file while presenting
    PRESENT_LOG_FILE=present.log present slides.md -vv
"""

import curses
import sys
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from pathlib import Path
from typing import List, Optional

from .config import appsettings
from .lib import Parser, Presenter, __version__, LOG, state_connectToLogger, logger_toFile
from .lib.terminal import CursesDisplay
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="present - Markdown slide presenter with runnable code blocks",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("inputFile", type=str, help="Markdown file to present")

parser.add_argument(
    "--dump",
    action="store_true",
    help="Print an outline of the parsed deck instead of presenting",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate that the input file exists.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the markdown file
            - envOK: True if environment is valid

    Exits:
        1 if input file not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = Path(state.inputFile).expanduser()
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the markdown file and parse it into a Deck.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added fields:
            - sourceLines: Lines of the file without line endings
            - deck: Parsed Deck

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source file...", level=2)
    try:
        state.sourceLines = state.inputSourceFile.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"Read {len(state.sourceLines)} lines from {state.inputSourceFile.name}", level=2)

    state.deck = Parser(state.sourceLines, debug=(state.verbosity >= 3)).parse()
    return state


def deck_outline(state: ProgramState) -> List[str]:
    """
    Describe a parsed deck, one line per slide.

    Example:
        "  2  # Running code            (6 lines, blocks: python)"
    """
    outline = [f"{state.inputSourceFile.name}: {len(state.deck)} slides"]
    for index, slide in enumerate(state.deck.slides, start=1):
        title = slide.title or "(untitled)"
        languages = ", ".join(block.language or "-" for block in slide.blocks)
        blocks = f", blocks: {languages}" if slide.blocks else ""
        outline.append(f"{index:>3}  {title:<30} ({len(slide.body)} lines{blocks})")
    return outline


def deck_report(inputstate: ProgramState) -> ProgramState:
    """
    Print the deck outline instead of presenting (--dump).

    Returns:
        ProgramState with added field:
            - presentResult: slide_count, status
    """
    state = inputstate.copy()
    if state.deck is None:
        print("Error: No parsed deck available", file=sys.stderr)
        sys.exit(1)

    for line in deck_outline(state):
        print(line)

    state.presentResult = {"status": True, "slide_count": len(state.deck), "final_index": None}
    return state


def deck_present(inputstate: ProgramState) -> ProgramState:
    """
    Run the interactive presentation in the terminal.

    Log output goes to PRESENT_LOG_FILE while curses owns the screen;
    without it, logging is silenced for the duration.

    Returns:
        ProgramState with added field:
            - presentResult: slide_count, final_index, status
    """
    state = inputstate.copy()
    if state.deck is None:
        print("Error: No parsed deck available", file=sys.stderr)
        sys.exit(1)

    if appsettings.log_file:
        logger_toFile(appsettings.log_file)
    else:
        state_connectToLogger(None)

    def present(screen) -> int:
        display = CursesDisplay(screen)
        session = Presenter(display).deck_start(state.deck, name=state.inputSourceFile.name)
        display.run()
        return session.current_index

    final_index = curses.wrapper(present)
    state_connectToLogger(state)

    state.presentResult = {
        "status": True,
        "slide_count": len(state.deck),
        "final_index": final_index,
    }
    LOG(f"Presented {final_index} of {len(state.deck)} slides", level=2)
    return state


def main(argv: Optional[List[str]] = None) -> ProgramState:
    """
    Main entry point - present a markdown file.

    Orchestrates the pipeline:
        1. env_check: Validate the input path
        2. source_parse: Read and parse the file into a Deck
        3. deck_present (or deck_report with --dump)

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Final ProgramState
    """
    options: Namespace = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)
    if appsettings.debug_mode:
        state.verbosity = max(state.verbosity, 3)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    final_stage = deck_report if state.dump else deck_present
    return pipeline(state, env_check, source_parse, final_stage)


if __name__ == "__main__":
    main()
