"""
present - Markdown slide presenter

Parse a markdown document into slides and step through them, running
fenced code blocks on demand.
"""

__version__ = "1.0.0"

from .parser import Parser, parse
from .sandbox import Sandbox, EvaluatorRegistry, Evaluator, PythonEvaluator, OutputSink
from .session import Session, SessionActiveError, NO_BLOCK_MESSAGE
from .presenter import Presenter
from .display import MemoryDisplay
from .layout import windows_configure
from .log import LOG, state_connectToLogger, logger_toFile

__all__ = [
    "Parser",
    "parse",
    "Sandbox",
    "EvaluatorRegistry",
    "Evaluator",
    "PythonEvaluator",
    "OutputSink",
    "Session",
    "SessionActiveError",
    "NO_BLOCK_MESSAGE",
    "Presenter",
    "MemoryDisplay",
    "windows_configure",
    "LOG",
    "state_connectToLogger",
    "logger_toFile",
    "__version__",
]
