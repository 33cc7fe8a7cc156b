"""
present - Markdown slide presenter

Parse a markdown document into slides and step through them, running
fenced code blocks on demand.
"""

__version__ = "1.0.0"

from .lib import Parser, Presenter, Session, Sandbox, MemoryDisplay, parse, LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Presenter",
    "Session",
    "Sandbox",
    "MemoryDisplay",
    "parse",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
