"""
Models package for present

Contains data structures and type definitions for parsing and presenting.
"""

from .state import ProgramState, SessionState, pipeline
from .slides import Block, Slide, Deck
from .execution import ExecutionResult, ExecutionStatus
from .display import (
    DisplayAdapter,
    Geometry,
    SurfaceHandle,
    SurfaceName,
    Subscription,
    PresentError,
    SurfaceError,
    EVENT_LEAVE,
    EVENT_RESIZED,
)

__all__ = [
    "ProgramState",
    "SessionState",
    "pipeline",
    "Block",
    "Slide",
    "Deck",
    "ExecutionResult",
    "ExecutionStatus",
    "DisplayAdapter",
    "Geometry",
    "SurfaceHandle",
    "SurfaceName",
    "Subscription",
    "PresentError",
    "SurfaceError",
    "EVENT_LEAVE",
    "EVENT_RESIZED",
]
