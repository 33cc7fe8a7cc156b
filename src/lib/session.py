"""
Presentation session

A Session owns one parsed Deck, a 1-based cursor into it and the four
display surfaces it renders into. It is driven entirely by host events:
key presses bound on the body surface, the body surface being closed, and
screen resizes.

Lifecycle:
    Session.start(...)   IDLE -> ACTIVE   surfaces created, keys bound,
                                          host options overridden
    session.quit()       ACTIVE -> IDLE   subscriptions removed, options
                                          restored, surfaces closed

Keys on the body surface:
    n  next slide        p  previous slide
    q  quit              X  execute the first code block of the slide
"""

from typing import Any, Dict, Iterable, List, Optional

from ..config import AppSettings, appsettings
from ..models.display import (
    EVENT_LEAVE,
    EVENT_RESIZED,
    DisplayAdapter,
    Geometry,
    PresentError,
    Subscription,
    SurfaceError,
    SurfaceHandle,
    SurfaceName,
)
from ..models.execution import ExecutionResult
from ..models.slides import Deck, Slide
from ..models.state import SessionState
from .layout import windows_configure
from .log import LOG
from .parser import Parser
from .sandbox import Sandbox


NO_BLOCK_MESSAGE = "no executable block"


class SessionActiveError(PresentError):
    """Raised when starting a session that is already active"""
    pass


class Session:
    """
    State machine for one running presentation

    Attributes:
        display: Adapter the session renders through
        deck: Parsed slides
        name: Source document name shown in the footer
        current_index: 1-based slide cursor, always within [1, len(deck)]
        state: SessionState.IDLE or SessionState.ACTIVE
        surfaces: Handle per SurfaceName while active
        layout: Geometry last applied to the surfaces
        body_lines: Lines currently shown on the body surface
        debug: Trace surfaces, options and renders (settings.debug_mode)
    """

    def __init__(
        self,
        display: DisplayAdapter,
        deck: Deck,
        name: str = "",
        settings: Optional[AppSettings] = None,
        sandbox: Optional[Sandbox] = None,
    ) -> None:
        self.display = display
        self.deck = deck
        self.name = name
        self.settings = settings or appsettings
        self.sandbox = sandbox or Sandbox()
        self.debug = self.settings.debug_mode

        self.current_index = 1
        self.state = SessionState.IDLE
        self.surfaces: Dict[SurfaceName, SurfaceHandle] = {}
        self.layout: Dict[SurfaceName, Geometry] = {}
        self.subscriptions: List[Subscription] = []
        self.restore: Dict[str, Any] = {}
        self.body_lines: List[str] = []

    @classmethod
    def start(
        cls,
        display: DisplayAdapter,
        lines: Iterable[str],
        name: str = "",
        settings: Optional[AppSettings] = None,
        sandbox: Optional[Sandbox] = None,
    ) -> "Session":
        """
        Parse a document and start presenting it

        Args:
            display: Host display adapter
            lines: Document lines
            name: Document name for the footer (typically the file name)
            settings: Configuration (defaults to appsettings)
            sandbox: Code block executor (defaults to a Python sandbox)

        Returns:
            The ACTIVE session, showing slide 1
        """
        deck = Parser(lines, settings=settings).parse()
        session = cls(display, deck, name=name, settings=settings, sandbox=sandbox)
        session.activate()
        return session

    @property
    def active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def slide_count(self) -> int:
        return len(self.deck)

    def slide_current(self) -> Slide:
        return self.deck.slide_get(self.current_index)

    def activate(self) -> None:
        """
        Enter the ACTIVE state

        Creates the surfaces (body focused), binds the navigation keys,
        installs the leave/resize hooks, overrides host options and shows
        the current slide.

        If a surface cannot be created, the ones already created are closed
        again and the session stays IDLE.

        Raises:
            SessionActiveError: If the session is already active
        """
        if self.active:
            raise SessionActiveError(f"Presentation of '{self.name}' is already running")

        columns, lines = self.display.dimensions()
        self.layout = windows_configure(columns, lines, self.settings)
        self.surfaces = {}
        try:
            for surface, geometry in self.layout.items():
                self.surfaces[surface] = self.display.surface_create(
                    geometry, focus=(surface is SurfaceName.BODY)
                )
                if self.debug:
                    LOG(f"Created {surface.value} surface {self.surfaces[surface].id}: {geometry}", level=3)
        except Exception:
            LOG(f"Surface creation failed, closing {len(self.surfaces)} surfaces", level=2)
            self.surfaces_close()
            self.surfaces = {}
            raise

        body = self.surfaces[SurfaceName.BODY]
        self.subscriptions = [
            self.display.keymap_set(body, "n", self.next),
            self.display.keymap_set(body, "p", self.previous),
            self.display.keymap_set(body, "q", self.quit),
            self.display.keymap_set(body, "X", self.execute_current_block),
            self.display.subscribe(EVENT_LEAVE, self.quit, handle=body),
            self.display.subscribe(EVENT_RESIZED, self.on_resize),
        ]

        self.options_apply()
        self.state = SessionState.ACTIVE
        LOG(f"Presenting '{self.name}': {self.slide_count} slides on {columns}x{lines}", level=2)

        self.render(self.current_index)

    def options_apply(self) -> None:
        """Set presentation host options, remembering the originals"""
        self.restore = {}
        for option, value in self.settings.presentation_options.items():
            self.restore[option] = self.display.option_get(option)
            self.display.option_set(option, value)
            if self.debug:
                LOG(f"Option {option}: {self.restore[option]!r} -> {value!r}", level=3)

    def options_restore(self) -> None:
        for option, original in self.restore.items():
            self.display.option_set(option, original)
        self.restore = {}

    def next(self) -> int:
        """Advance one slide; stays put on the last slide"""
        if not self.active:
            return self.current_index
        self.current_index = min(self.current_index + 1, self.slide_count)
        self.render(self.current_index)
        return self.current_index

    def previous(self) -> int:
        """Go back one slide; stays put on the first slide"""
        if not self.active:
            return self.current_index
        self.current_index = max(self.current_index - 1, 1)
        self.render(self.current_index)
        return self.current_index

    def title_center(self, title: str) -> str:
        """Left-pad a title so it sits centered on the header surface"""
        width = self.layout[SurfaceName.HEADER].width
        padding = max(0, (width - len(title)) // 2)
        return " " * padding + title

    def footer_format(self) -> str:
        return f" {self.current_index} / {self.slide_count} | {self.name}"

    def render(self, index: int, appendix: Optional[List[str]] = None) -> None:
        """
        Write slide index to the header, body and footer surfaces

        Args:
            index: 1-based slide to show
            appendix: Extra lines shown after the slide body
        """
        if not self.active:
            return

        slide = self.deck.slide_get(index)
        self.body_lines = list(slide.body) + list(appendix or [])
        if self.debug:
            LOG(f"Rendering slide {index}/{self.slide_count} ({len(self.body_lines)} body lines)", level=3)

        self.display.lines_write(self.surfaces[SurfaceName.HEADER], [self.title_center(slide.title)])
        self.display.lines_write(self.surfaces[SurfaceName.BODY], self.body_lines)
        self.display.lines_write(self.surfaces[SurfaceName.FOOTER], [self.footer_format()])

    def execute_current_block(self) -> Optional[ExecutionResult]:
        """
        Run the first code block of the current slide

        The slide is re-rendered with a "# Code" section holding the
        captured output. Without an executable block the display is left
        untouched and the user is notified instead.

        Returns:
            The ExecutionResult, or None when the slide has no block
        """
        if not self.active:
            return None

        block = self.slide_current().block_first()
        if block is None:
            self.display.notify(NO_BLOCK_MESSAGE)
            return None

        result = self.sandbox.execute(block)
        if not result.executed:
            self.display.notify(f"{NO_BLOCK_MESSAGE}: '{block.language}' blocks cannot be run")
            return result

        appendix = ["", self.settings.code_heading, ""] + result.lines
        self.render(self.current_index, appendix=appendix)
        return result

    def on_resize(self) -> None:
        """Re-apply freshly computed geometry to every surface"""
        body = self.surfaces.get(SurfaceName.BODY)
        if body is None or not self.display.is_valid(body):
            return

        columns, lines = self.display.dimensions()
        self.layout = windows_configure(columns, lines, self.settings)
        for surface, handle in self.surfaces.items():
            self.display.geometry_set(handle, self.layout[surface])
        LOG(f"Resized to {columns}x{lines}", level=3)

    def quit(self) -> None:
        """
        Leave the presentation

        Safe to call any number of times. Surfaces that are already gone
        are skipped.
        """
        if not self.active:
            return
        self.state = SessionState.IDLE

        for subscription in self.subscriptions:
            subscription.remove()
        self.subscriptions = []

        self.options_restore()
        self.surfaces_close()

        LOG(f"Presentation of '{self.name}' ended on slide {self.current_index}", level=2)

    def surfaces_close(self) -> None:
        """Close every surface the session created; already-gone ones are skipped"""
        for surface, handle in self.surfaces.items():
            try:
                self.display.close(handle)
            except SurfaceError:
                LOG(f"Surface {surface.value} already closed", level=3)
