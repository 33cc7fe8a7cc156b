"""
Sandbox for executing slide code blocks

Evaluates a Block's source in a fresh namespace and captures everything it
prints. The evaluated code gets its own `print`, bound to an OutputSink that
only lives for the duration of the run, and sys.stdout/sys.stderr point at
the same sink while it runs so direct stream writes are captured too.

Evaluators are looked up by the block's language tag through an
EvaluatorRegistry, so new languages can be added without touching the
Session. Blocks in languages without an evaluator are reported as
UNSUPPORTED and never run.

Example:
    >>> result = Sandbox().execute(Block(language="python", body="print(1, 2)"))
    >>> result.lines
    ['1\\t2']
"""

import builtins
from abc import ABC, abstractmethod
from contextlib import redirect_stderr, redirect_stdout
from typing import Any, Dict, List, Optional, Tuple

from ..models.execution import ExecutionResult, ExecutionStatus
from ..models.slides import Block
from .log import LOG


class OutputSink:
    """
    In-memory capture of everything printed during one evaluation

    Used as a context manager: writes are accepted between __enter__ and
    __exit__ only. Once sealed, further writes (e.g. through a `print`
    reference the evaluated code stashed away) are dropped.

    Attributes:
        lines: Completed output lines, in order
    """

    def __init__(self) -> None:
        self.lines: List[str] = []
        self._pending = ""
        self._open = False

    def __enter__(self) -> "OutputSink":
        self._open = True
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.seal()

    @property
    def open(self) -> bool:
        return self._open

    def seal(self) -> None:
        """Flush any unterminated line and stop accepting writes"""
        if not self._open:
            return
        if self._pending:
            self.lines.append(self._pending)
            self._pending = ""
        self._open = False

    def write(self, text: str) -> None:
        """Append raw text; every newline completes a line"""
        if not self._open:
            return
        parts = (self._pending + text).split("\n")
        self.lines.extend(parts[:-1])
        self._pending = parts[-1]

    def print(self, *values: Any, sep: Optional[str] = "\t", end: Optional[str] = "\n",
              file: Any = None, flush: bool = False) -> None:
        """
        Replacement for the builtin print

        Values are joined with a tab unless sep is given. The file and
        flush arguments are accepted for compatibility and ignored:
        everything lands in this sink.
        """
        sep = "\t" if sep is None else sep
        end = "\n" if end is None else end
        self.write(sep.join(str(value) for value in values) + end)

    def flush(self) -> None:
        """Stream protocol; captured text needs no flushing"""

    def diagnostic(self, exc: BaseException) -> None:
        """Record a failure as a single captured line"""
        if self._pending:
            self.write("\n")
        message = str(exc)
        name = type(exc).__name__
        self.write(f"{name}: {message}\n" if message else f"{name}\n")


class Evaluator(ABC):
    """
    Runs source code of one language against an OutputSink

    Attributes:
        name: Primary language tag (e.g. "python")
        aliases: Additional tags handled by this evaluator
    """

    name: str = ""
    aliases: Tuple[str, ...] = ()

    @abstractmethod
    def evaluate(self, source: str, sink: OutputSink) -> None:
        """
        Evaluate source, printing through sink

        Exceptions raised by the evaluated code propagate to the Sandbox.
        """


class PythonEvaluator(Evaluator):
    """
    Evaluator for Python blocks

    Each run gets a fresh global namespace whose builtins are a copy of the
    interpreter's with `print` swapped for the sink's. Names defined by one
    block are not visible to the next.
    """

    name = "python"
    aliases = ("py", "python3", "")

    def namespace_build(self, sink: OutputSink) -> Dict[str, Any]:
        sandbox_builtins = dict(vars(builtins))
        sandbox_builtins["print"] = sink.print
        return {
            "__builtins__": sandbox_builtins,
            "__name__": "__present__",
        }

    def evaluate(self, source: str, sink: OutputSink) -> None:
        code = compile(source, "<slide block>", "exec")
        exec(code, self.namespace_build(sink))


class EvaluatorRegistry:
    """
    Registry of evaluators keyed by language tag

    Maps language names and aliases to Evaluator instances.
    """

    def __init__(self) -> None:
        """Initialize the registry with the built-in Python evaluator"""
        self.evaluators: Dict[str, Evaluator] = {}
        self.register(PythonEvaluator())

    def register(self, evaluator: Evaluator) -> None:
        """Register an evaluator under its name and aliases"""
        self.evaluators[evaluator.name] = evaluator
        for alias in evaluator.aliases:
            self.evaluators[alias] = evaluator

    def get(self, language: str) -> Optional[Evaluator]:
        """
        Get the evaluator for a language tag

        Lookup is case-insensitive and ignores surrounding whitespace
        (so "```Python " resolves like "```python").

        Returns:
            Evaluator or None if the language is not executable
        """
        return self.evaluators.get(language.strip().lower())

    def languages_list(self) -> List[str]:
        """All tags with a registered evaluator, sorted"""
        return sorted(self.evaluators)


class Sandbox:
    """
    Executes code blocks with captured output

    execute() never raises for failures of the evaluated code: they end up
    as the last captured line and the result status is FAILED.
    """

    def __init__(self, registry: Optional[EvaluatorRegistry] = None) -> None:
        self.registry = registry or EvaluatorRegistry()

    def executable_is(self, block: Block) -> bool:
        return self.registry.get(block.language) is not None

    def execute(self, block: Block) -> ExecutionResult:
        """
        Execute one block

        Args:
            block: Block to run

        Returns:
            ExecutionResult with captured lines. Status is UNSUPPORTED (and
            nothing runs) when no evaluator handles block.language.

        Example:
            Block body "print('a')\\n1/0" yields:
            ExecutionResult(lines=["a", "ZeroDivisionError: division by zero"],
                            status=ExecutionStatus.FAILED)
        """
        evaluator = self.registry.get(block.language)
        if evaluator is None:
            LOG(f"No evaluator for language '{block.language}'", level=2)
            return ExecutionResult(status=ExecutionStatus.UNSUPPORTED, language=block.language)

        status = ExecutionStatus.OK
        with OutputSink() as sink, redirect_stdout(sink), redirect_stderr(sink):
            try:
                evaluator.evaluate(block.body, sink)
            except (Exception, SystemExit) as e:
                LOG(f"Block raised {type(e).__name__}: {e}", level=2)
                sink.diagnostic(e)
                status = ExecutionStatus.FAILED

        LOG(f"Captured {len(sink.lines)} output lines", level=3)
        return ExecutionResult(lines=sink.lines, status=status, language=block.language)
