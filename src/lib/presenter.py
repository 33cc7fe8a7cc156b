"""
Host command surface

The Presenter is what a host wires its "start presentation" command to.
It owns at most one active Session per display and refuses to silently
overwrite a running one.
"""

from typing import Iterable, Optional

from ..config import AppSettings, appsettings
from ..models.display import DisplayAdapter
from ..models.slides import Deck
from .log import LOG
from .parser import Parser
from .sandbox import Sandbox
from .session import Session, SessionActiveError


class Presenter:
    """
    Starts presentations on a display

    Attributes:
        display: Host display adapter shared by every session
        settings: Configuration passed on to sessions
        sandbox: Code block executor shared by every session
    """

    def __init__(
        self,
        display: DisplayAdapter,
        settings: Optional[AppSettings] = None,
        sandbox: Optional[Sandbox] = None,
    ) -> None:
        self.display = display
        self.settings = settings or appsettings
        self.sandbox = sandbox or Sandbox()
        self._session: Optional[Session] = None

    @property
    def active(self) -> Optional[Session]:
        """The running session, or None"""
        if self._session is not None and not self._session.active:
            self._session = None
        return self._session

    def start(self, lines: Iterable[str], name: str = "", replace: bool = False) -> Session:
        """
        Parse a document and start presenting it

        Args:
            lines: Document lines
            name: Document name for the footer
            replace: Quit a running presentation first instead of failing

        Returns:
            The new ACTIVE session

        Raises:
            SessionActiveError: If a presentation is running and replace is False
        """
        deck = Parser(lines, settings=self.settings).parse()
        return self.deck_start(deck, name=name, replace=replace)

    def deck_start(self, deck: Deck, name: str = "", replace: bool = False) -> Session:
        """
        Start presenting an already parsed Deck

        Same guard as start(); used when the caller parsed the document
        itself (the CLI parses once, then either dumps or presents).
        """
        running = self.active
        if running is not None:
            if not replace:
                raise SessionActiveError(
                    f"Presentation of '{running.name}' is already running"
                )
            LOG(f"Replacing presentation of '{running.name}'", level=2)
            running.quit()

        session = Session(
            self.display, deck, name=name, settings=self.settings, sandbox=self.sandbox
        )
        session.activate()
        self._session = session
        return session

    def quit(self) -> None:
        """Quit the running presentation, if any"""
        running = self.active
        if running is not None:
            running.quit()
        self._session = None
