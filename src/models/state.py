"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern,
the pipeline() helper for composing transformation stages, and the
SessionState lifecycle enum of a presentation.
"""

from argparse import Namespace
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, TYPE_CHECKING

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .slides import Deck


PS = TypeVar("PS", bound="ProgramState")


class SessionState(Enum):
    """Lifecycle of a presentation Session: IDLE -> ACTIVE -> IDLE"""
    IDLE = "idle"
    ACTIVE = "active"


@dataclass
class ProgramState:
    """
    Central state container for the command-line pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputFile, verbosity, dump
        - env_check: inputSourceFile, envOK
        - source_parse: sourceLines, deck
        - deck_present / deck_report: presentResult

    Attributes:
        inputFile: Markdown file to present
        verbosity: Logging verbosity level (1-3)
        dump: Print a deck outline instead of presenting
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the markdown file
        sourceLines: Raw lines read from the file
        deck: Parsed slide deck
        presentResult: Summary of the run (slide_count, final_index, status)
    """

    # CLI arguments
    inputFile: str = field(default="")
    verbosity: int = field(default=1)
    dump: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    sourceLines: Optional[List[str]] = field(default=None)
    deck: Optional["Deck"] = field(default=None)
    presentResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace.

        Args:
            options: Parsed CLI arguments (inputFile, verbosity, dump)

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that ProgramState knows about
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            deck_present,
        )

    This is equivalent to:
        deck_present(source_parse(env_check(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
