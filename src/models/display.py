"""
Display adapter contract

Defines the narrow interface the presentation Session renders through,
along with the geometry and handle types shared by all adapters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple


EVENT_LEAVE = "leave"
EVENT_RESIZED = "resized"


class PresentError(Exception):
    """Base class for errors raised by present"""
    pass


class SurfaceError(PresentError):
    """Raised when a display surface handle is no longer valid"""
    pass


class SurfaceName(Enum):
    """
    The four independently addressable surfaces of a presentation

    Ordered back to front as they are created.
    """
    BACKGROUND = "background"
    HEADER = "header"
    BODY = "body"
    FOOTER = "footer"


@dataclass(frozen=True)
class Geometry:
    """
    Placement of one surface on the screen

    Attributes:
        width: Surface width in columns
        height: Surface height in lines
        col: Left edge, in columns from the screen origin
        row: Top edge, in lines from the screen origin
        stack_order: Higher values are drawn on top
        relative_to: Coordinate origin; always "screen"
    """
    width: int
    height: int
    col: int
    row: int
    stack_order: int = 1
    relative_to: str = "screen"


@dataclass(frozen=True)
class SurfaceHandle:
    """Opaque reference to a surface created by a DisplayAdapter"""
    id: int


class Subscription:
    """
    Removable registration of a callback with a display adapter

    Returned by DisplayAdapter.keymap_set() and DisplayAdapter.subscribe().
    Calling remove() more than once is harmless.
    """

    def __init__(self, remover: Callable[[], None], description: str = "") -> None:
        self._remover: Optional[Callable[[], None]] = remover
        self.description = description

    @property
    def active(self) -> bool:
        return self._remover is not None

    def remove(self) -> None:
        if self._remover is None:
            return
        remover, self._remover = self._remover, None
        remover()

    def __repr__(self) -> str:
        state = "active" if self.active else "removed"
        return f"<Subscription {self.description} ({state})>"


class DisplayAdapter(ABC):
    """
    Host display surface consumed by the presentation Session

    Implementations own the actual rendering; the Session only pushes
    lines and geometry through this interface and reacts to the
    'leave' and 'resized' events it subscribes to.
    """

    @abstractmethod
    def dimensions(self) -> Tuple[int, int]:
        """Return the current (columns, lines) of the screen"""

    @abstractmethod
    def surface_create(self, geometry: Geometry, focus: bool = False) -> SurfaceHandle:
        """Create a surface placed at geometry, optionally giving it focus"""

    @abstractmethod
    def lines_write(self, handle: SurfaceHandle, lines: List[str]) -> None:
        """Replace the full contents of a surface"""

    @abstractmethod
    def geometry_set(self, handle: SurfaceHandle, geometry: Geometry) -> None:
        """Move/resize a surface"""

    @abstractmethod
    def close(self, handle: SurfaceHandle) -> None:
        """
        Close a surface

        Raises:
            SurfaceError: If the handle was already closed or never existed
        """

    @abstractmethod
    def is_valid(self, handle: SurfaceHandle) -> bool:
        """Check whether a surface is still open"""

    @abstractmethod
    def keymap_set(
        self, handle: SurfaceHandle, key: str, callback: Callable[[], Any]
    ) -> Subscription:
        """Bind a key pressed while handle has focus"""

    @abstractmethod
    def subscribe(
        self,
        event: str,
        callback: Callable[[], Any],
        handle: Optional[SurfaceHandle] = None,
    ) -> Subscription:
        """
        Subscribe to a host event

        Args:
            event: EVENT_LEAVE (surface closed/left) or EVENT_RESIZED
            callback: Called with no arguments when the event fires
            handle: Restrict EVENT_LEAVE to one surface
        """

    @abstractmethod
    def option_get(self, name: str) -> Any:
        """Read an ambient host option (e.g. 'cmdheight')"""

    @abstractmethod
    def option_set(self, name: str, value: Any) -> None:
        """Set an ambient host option"""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Show a short informational message to the user"""
