"""
Curses display adapter

Renders presentation surfaces into curses windows and turns terminal input
into the host events a Session listens for:

- key presses are dispatched to the bindings of the focused surface
- KEY_RESIZE fires the 'resized' event
- closing a surface fires its 'leave' event

run() returns once every surface has been closed.

Usage:
    curses.wrapper(lambda screen: ...CursesDisplay(screen)...)
"""

import curses
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
from .log import LOG


@dataclass
class CursesSurface:
    """One surface and the curses window drawing it"""
    handle: SurfaceHandle
    geometry: Geometry
    window: Any
    lines: List[str] = field(default_factory=list)
    keymap: Dict[str, Callable[[], Any]] = field(default_factory=dict)


class CursesDisplay(DisplayAdapter):
    """
    DisplayAdapter drawing into a curses screen

    Attributes:
        screen: The curses standard screen
        surfaces: Open surfaces by handle id
        focused: Surface receiving key presses
        options: Host options; only stored, curses has no command line
        message: Last notify() message, shown on the bottom row until
                 the next key press
    """

    def __init__(self, screen: Any) -> None:
        self.screen = screen
        self.surfaces: Dict[int, CursesSurface] = {}
        self.focused: Optional[SurfaceHandle] = None
        self.options: Dict[str, Any] = {"cmdheight": 1}
        self.message = ""
        self._listeners: List[Tuple[str, Callable[[], Any], Optional[SurfaceHandle]]] = []
        self._next_id = 1

        try:
            curses.curs_set(0)
        except curses.error:
            LOG("Terminal cannot hide the cursor", level=3)

    def surface_get(self, handle: SurfaceHandle) -> CursesSurface:
        surface = self.surfaces.get(handle.id)
        if surface is None:
            raise SurfaceError(f"Invalid surface handle {handle.id}")
        return surface

    def window_make(self, geometry: Geometry) -> Any:
        """Create a window for geometry, clipped to the screen"""
        columns, lines = self.dimensions()
        row = min(max(0, geometry.row), lines - 1)
        col = min(max(0, geometry.col), columns - 1)
        height = max(1, min(geometry.height, lines - row))
        width = max(1, min(geometry.width, columns - col))
        return curses.newwin(height, width, row, col)

    # DisplayAdapter interface

    def dimensions(self) -> Tuple[int, int]:
        lines, columns = self.screen.getmaxyx()
        return columns, lines

    def surface_create(self, geometry: Geometry, focus: bool = False) -> SurfaceHandle:
        handle = SurfaceHandle(self._next_id)
        self._next_id += 1
        self.surfaces[handle.id] = CursesSurface(
            handle=handle, geometry=geometry, window=self.window_make(geometry)
        )
        if focus:
            self.focused = handle
        self.refresh()
        return handle

    def lines_write(self, handle: SurfaceHandle, lines: List[str]) -> None:
        self.surface_get(handle).lines = list(lines)
        self.refresh()

    def geometry_set(self, handle: SurfaceHandle, geometry: Geometry) -> None:
        surface = self.surface_get(handle)
        surface.geometry = geometry
        surface.window = self.window_make(geometry)
        self.refresh()

    def close(self, handle: SurfaceHandle) -> None:
        self.surface_get(handle)
        del self.surfaces[handle.id]
        if self.focused == handle:
            self.focused = None
        self.emit(EVENT_LEAVE, handle)
        self.refresh()

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
        listener = (event, callback, handle)
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
        self.message = message
        self.refresh()

    # Event loop

    def emit(self, event: str, handle: Optional[SurfaceHandle] = None) -> None:
        for name, callback, target in list(self._listeners):
            if name == event and (target is None or target == handle):
                callback()

    def run(self) -> None:
        """Dispatch terminal input until every surface is closed"""
        while self.surfaces:
            try:
                key = self.screen.get_wch()
            except curses.error:
                continue

            if key == curses.KEY_RESIZE:
                curses.update_lines_cols()
                self.emit(EVENT_RESIZED)
                self.refresh()
                continue

            if self.message:
                self.message = ""
                self.refresh()

            if not isinstance(key, str) or self.focused is None:
                continue
            callback = self.surfaces[self.focused.id].keymap.get(key)
            if callback is not None:
                callback()

    def refresh(self) -> None:
        """Redraw all surfaces back to front"""
        self.screen.erase()
        self.screen.noutrefresh()

        for surface in sorted(self.surfaces.values(), key=lambda s: s.geometry.stack_order):
            surface.window.erase()
            self.lines_draw(surface.window, surface.lines)
            surface.window.noutrefresh()

        if self.message:
            columns, lines = self.dimensions()
            window = curses.newwin(1, columns, lines - 1, 0)
            self.lines_draw(window, [self.message])
            window.noutrefresh()

        curses.doupdate()

    @staticmethod
    def lines_draw(window: Any, lines: List[str]) -> None:
        height, width = window.getmaxyx()
        for row, line in enumerate(lines[:height]):
            try:
                window.addnstr(row, 0, line.expandtabs(), width)
            except curses.error:
                # Writing the bottom-right cell moves the cursor off-window
                pass
