"""
Execution result models

Returned by the Sandbox after evaluating a code block.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ExecutionStatus(Enum):
    """Outcome of one block execution"""
    OK = "ok"                    # Ran to completion
    FAILED = "failed"            # Raised; diagnostic captured as last line
    UNSUPPORTED = "unsupported"  # No evaluator for the block language


@dataclass
class ExecutionResult:
    """
    Captured output of one block execution

    Attributes:
        lines: Output lines in the order they were printed. On failure the
               last line is a diagnostic ("ZeroDivisionError: division by zero")
        status: How the run ended
        language: Language tag of the executed block

    Example:
        Executing "print(1, 2)":
        ExecutionResult(lines=["1\\t2"], status=ExecutionStatus.OK, language="python")
    """
    lines: List[str] = field(default_factory=list)
    status: ExecutionStatus = ExecutionStatus.OK
    language: str = ""

    @property
    def executed(self) -> bool:
        """True when the block was actually evaluated"""
        return self.status is not ExecutionStatus.UNSUPPORTED
