"""
In-memory display adapter

A complete DisplayAdapter that keeps every surface, option and message in
plain Python structures. Used for headless hosts and tests: key presses
and resizes are simulated with press() and resize().

Example:
    >>> display = MemoryDisplay(columns=80, lines=24)
    >>> session = Session.start(display, ["# Hello", "world"], name="talk.md")
    >>> display.lines_get(session.surfaces[SurfaceName.BODY])
    ['world']
    >>> display.press("q")
    True
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.display import (
    EVENT_LEAVE,
    EVENT_RESIZED,
    DisplayAdapter,
    Geometry,
    Subscription,
    SurfaceError,
    SurfaceHandle,
)


@dataclass
class MemorySurface:
    """State of one surface held by MemoryDisplay"""
    handle: SurfaceHandle
    geometry: Geometry
    lines: List[str] = field(default_factory=list)
    keymap: Dict[str, Callable[[], Any]] = field(default_factory=dict)


@dataclass
class _Listener:
    event: str
    callback: Callable[[], Any]
    handle: Optional[SurfaceHandle] = None


class MemoryDisplay(DisplayAdapter):
    """
    DisplayAdapter backed by dictionaries

    Attributes:
        columns: Simulated screen width
        lines: Simulated screen height
        surfaces: Open surfaces by handle id
        focused: Handle of the surface receiving key presses
        options: Host options (starts with cmdheight=1)
        notifications: Every message passed to notify(), in order
    """

    def __init__(
        self,
        columns: int = 80,
        lines: int = 24,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.columns = columns
        self.lines = lines
        self.surfaces: Dict[int, MemorySurface] = {}
        self.focused: Optional[SurfaceHandle] = None
        self.options: Dict[str, Any] = dict(options) if options is not None else {"cmdheight": 1}
        self.notifications: List[str] = []
        self._listeners: List[_Listener] = []
        self._next_id = 1

    def surface_get(self, handle: SurfaceHandle) -> MemorySurface:
        """
        Raises:
            SurfaceError: If handle is not open
        """
        surface = self.surfaces.get(handle.id)
        if surface is None:
            raise SurfaceError(f"Invalid surface handle {handle.id}")
        return surface

    # DisplayAdapter interface

    def dimensions(self) -> Tuple[int, int]:
        return self.columns, self.lines

    def surface_create(self, geometry: Geometry, focus: bool = False) -> SurfaceHandle:
        handle = SurfaceHandle(self._next_id)
        self._next_id += 1
        self.surfaces[handle.id] = MemorySurface(handle=handle, geometry=geometry)
        if focus:
            self.focused = handle
        return handle

    def lines_write(self, handle: SurfaceHandle, lines: List[str]) -> None:
        self.surface_get(handle).lines = list(lines)

    def geometry_set(self, handle: SurfaceHandle, geometry: Geometry) -> None:
        self.surface_get(handle).geometry = geometry

    def close(self, handle: SurfaceHandle) -> None:
        self.surface_get(handle)
        del self.surfaces[handle.id]
        if self.focused == handle:
            self.focused = None
        self.emit(EVENT_LEAVE, handle)

    def is_valid(self, handle: SurfaceHandle) -> bool:
        return handle.id in self.surfaces

    def keymap_set(
        self, handle: SurfaceHandle, key: str, callback: Callable[[], Any]
    ) -> Subscription:
        self.surface_get(handle).keymap[key] = callback

        def remove() -> None:
            surface = self.surfaces.get(handle.id)
            if surface is not None and surface.keymap.get(key) is callback:
                del surface.keymap[key]

        return Subscription(remove, description=f"key {key!r} on surface {handle.id}")

    def subscribe(
        self,
        event: str,
        callback: Callable[[], Any],
        handle: Optional[SurfaceHandle] = None,
    ) -> Subscription:
        listener = _Listener(event=event, callback=callback, handle=handle)
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(remove, description=f"event {event!r}")

    def option_get(self, name: str) -> Any:
        return self.options.get(name)

    def option_set(self, name: str, value: Any) -> None:
        self.options[name] = value

    def notify(self, message: str) -> None:
        self.notifications.append(message)

    # Simulated host events

    def emit(self, event: str, handle: Optional[SurfaceHandle] = None) -> None:
        """Fire event for every matching listener"""
        for listener in list(self._listeners):
            if listener.event != event:
                continue
            if listener.handle is not None and listener.handle != handle:
                continue
            listener.callback()

    def press(self, key: str, handle: Optional[SurfaceHandle] = None) -> bool:
        """
        Simulate a key press on handle (defaults to the focused surface)

        Returns:
            True if a binding handled the key
        """
        target = handle or self.focused
        if target is None or not self.is_valid(target):
            return False
        callback = self.surface_get(target).keymap.get(key)
        if callback is None:
            return False
        callback()
        return True

    def resize(self, columns: int, lines: int) -> None:
        """Simulate a screen resize"""
        self.columns = columns
        self.lines = lines
        self.emit(EVENT_RESIZED)

    def lines_get(self, handle: SurfaceHandle) -> List[str]:
        return list(self.surface_get(handle).lines)

    def geometry_get(self, handle: SurfaceHandle) -> Geometry:
        return self.surface_get(handle).geometry

    def listeners_count(self, event: Optional[str] = None) -> int:
        """Number of live event subscriptions (for event, if given)"""
        return sum(1 for listener in self._listeners if event is None or listener.event == event)
