"""
Presentation session tests

Drives a Session headlessly through MemoryDisplay: rendering, navigation,
code execution, resize handling and teardown.
"""

import pytest
from loguru import logger

from present.config import AppSettings
from present.lib.display import MemoryDisplay
from present.lib.layout import windows_configure
from present.lib.log import state_connectToLogger
from present.lib.session import NO_BLOCK_MESSAGE, Session, SessionActiveError
from present.models.display import EVENT_LEAVE, EVENT_RESIZED, SurfaceError, SurfaceName
from present.models.execution import ExecutionStatus
from present.models.slides import Deck, Slide
from present.models.state import ProgramState, SessionState


SCENARIO = ["# Title 1", "body a", "# Title 2", "```python", "print(1,2)", "```"]


@pytest.fixture
def display():
    return MemoryDisplay(columns=80, lines=24)


@pytest.fixture
def session(display):
    return Session.start(display, SCENARIO, name="talk.md")


def header(display, session):
    return display.lines_get(session.surfaces[SurfaceName.HEADER])


def body(display, session):
    return display.lines_get(session.surfaces[SurfaceName.BODY])


def footer(display, session):
    return display.lines_get(session.surfaces[SurfaceName.FOOTER])


class FlakyDisplay(MemoryDisplay):
    """MemoryDisplay whose surface creation fails after a number of surfaces"""

    def __init__(self, fail_after, **kwargs):
        super().__init__(**kwargs)
        self.fail_after = fail_after

    def surface_create(self, geometry, focus=False):
        if len(self.surfaces) >= self.fail_after:
            raise SurfaceError("out of windows")
        return super().surface_create(geometry, focus=focus)


@pytest.fixture
def trace():
    messages = []
    sink_id = logger.add(messages.append, format="{message}", level="DEBUG")
    state_connectToLogger(ProgramState(verbosity=3))
    yield messages
    state_connectToLogger(None)
    logger.remove(sink_id)


class TestStart:
    """Test entering the ACTIVE state"""

    def test_starts_on_first_slide(self, display, session):
        """A new session is active and shows slide 1"""
        assert session.state is SessionState.ACTIVE
        assert session.current_index == 1
        assert session.slide_count == 2
        assert body(display, session) == ["body a"]

    def test_four_surfaces_body_focused(self, display, session):
        """All four surfaces exist and the body has focus"""
        assert set(session.surfaces) == set(SurfaceName)
        assert len(display.surfaces) == 4
        assert display.focused == session.surfaces[SurfaceName.BODY]

    def test_geometry_from_dimensions(self, display, session):
        """Surfaces are placed by the layout for the current screen"""
        layout = windows_configure(80, 24)
        for name, handle in session.surfaces.items():
            assert display.geometry_get(handle) == layout[name]

    def test_options_overridden(self, display, session):
        """cmdheight is set to 0 while presenting"""
        assert display.options["cmdheight"] == 0
        assert session.restore == {"cmdheight": 1}

    def test_hooks_installed(self, display, session):
        """One leave and one resize hook are registered"""
        assert display.listeners_count(EVENT_LEAVE) == 1
        assert display.listeners_count(EVENT_RESIZED) == 1

    def test_activate_twice_rejected(self, session):
        """Re-activating a running session is refused"""
        with pytest.raises(SessionActiveError):
            session.activate()

    def test_empty_document(self, display):
        """An empty document still presents one blank slide"""
        session = Session.start(display, [], name="empty.md")

        assert session.slide_count == 1
        assert body(display, session) == []
        assert footer(display, session) == [" 1 / 1 | empty.md"]

    def test_failed_activate_closes_surfaces(self):
        """A surface creation failure closes the surfaces already created"""
        display = FlakyDisplay(fail_after=2, columns=80, lines=24)
        session = Session(display, Deck(slides=[Slide(title="# A")]), name="x.md")

        with pytest.raises(SurfaceError):
            session.activate()

        assert display.surfaces == {}
        assert session.surfaces == {}
        assert session.state is SessionState.IDLE
        assert display.listeners_count() == 0
        assert display.options["cmdheight"] == 1

    def test_activate_after_failure(self):
        """Once the display recovers the same session can be activated"""
        display = FlakyDisplay(fail_after=3, columns=80, lines=24)
        session = Session(display, Deck(slides=[Slide(title="# A")]), name="x.md")
        with pytest.raises(SurfaceError):
            session.activate()

        display.fail_after = 4
        session.activate()

        assert session.state is SessionState.ACTIVE
        assert len(display.surfaces) == 4


class TestRender:
    """Test what is written to each surface"""

    def test_title_centered(self, display, session):
        """The title is left-padded by half the free width"""
        title = "# Title 1"
        pad = (80 - len(title)) // 2

        assert header(display, session) == [" " * pad + title]

    def test_title_wider_than_screen(self):
        """No padding when the title does not fit"""
        display = MemoryDisplay(columns=10, lines=24)
        session = Session.start(display, ["# A very long title indeed"], name="x.md")

        assert header(display, session) == ["# A very long title indeed"]

    def test_footer(self, display, session):
        """Footer shows position, count and document name"""
        assert footer(display, session) == [" 1 / 2 | talk.md"]

    def test_untitled_preamble(self, display):
        """An untitled preamble slide renders an all-blank header"""
        session = Session.start(display, ["hello", "# A"], name="x.md")

        assert header(display, session) == [" " * 40]
        assert body(display, session) == ["hello"]


class TestNavigation:
    """Test next/previous clamping"""

    def test_next(self, display, session):
        """next() moves to slide 2 and re-renders"""
        assert session.next() == 2
        assert body(display, session) == ["```python", "print(1,2)", "```"]
        assert footer(display, session) == [" 2 / 2 | talk.md"]
        assert header(display, session)[0].endswith("# Title 2")

    def test_next_at_last_is_noop(self, session):
        """next() on the last slide stays there"""
        session.next()
        assert session.next() == 2
        assert session.current_index == 2

    def test_previous_at_first_is_noop(self, display, session):
        """previous() on slide 1 stays there"""
        assert session.previous() == 1
        assert body(display, session) == ["body a"]

    def test_previous(self, session):
        """previous() goes back"""
        session.next()
        assert session.previous() == 1

    def test_keys(self, display, session):
        """n and p are bound on the body surface"""
        assert display.press("n")
        assert session.current_index == 2
        assert display.press("p")
        assert session.current_index == 1

    def test_unbound_key(self, display, session):
        """Other keys do nothing"""
        assert not display.press("z")
        assert session.current_index == 1

    def test_many_presses_stay_in_range(self, display, session):
        """Index never leaves [1, slide_count]"""
        for _ in range(5):
            display.press("n")
        assert session.current_index == 2
        for _ in range(5):
            display.press("p")
        assert session.current_index == 1


class TestExecute:
    """Test running a slide's first code block"""

    def test_execute_appends_code_section(self, display, session):
        """Output is shown under a '# Code' heading after the body"""
        session.next()
        result = session.execute_current_block()

        assert result.status is ExecutionStatus.OK
        assert result.lines == ["1\t2"]
        assert body(display, session) == [
            "```python", "print(1,2)", "```", "", "# Code", "", "1\t2",
        ]

    def test_execute_key(self, display, session):
        """X runs the block"""
        display.press("n")
        display.press("X")

        assert body(display, session)[-1] == "1\t2"

    def test_no_block(self, display, session):
        """Without a block nothing changes and the user is told"""
        before = body(display, session)
        result = session.execute_current_block()

        assert result is None
        assert body(display, session) == before
        assert display.notifications == [NO_BLOCK_MESSAGE]

    def test_failure_keeps_session_active(self, display):
        """A failing block is reported inline; the session keeps running"""
        session = Session.start(display, ["# Broken", "```python", "print(", "```"], name="x.md")
        result = session.execute_current_block()

        assert result.status is ExecutionStatus.FAILED
        assert session.state is SessionState.ACTIVE
        shown = body(display, session)
        assert shown[:6] == ["```python", "print(", "```", "", "# Code", ""]
        assert shown[6].startswith("SyntaxError")
        assert display.press("q")

    def test_only_first_block_runs(self, display):
        """The second block on a slide is ignored"""
        session = Session.start(display, [
            "# Two blocks",
            "```python", "print('first')", "```",
            "```python", "print('second')", "```",
        ])
        result = session.execute_current_block()

        assert result.lines == ["first"]

    def test_unsupported_language(self, display):
        """Blocks of other languages are not run"""
        session = Session.start(display, ["# Lua", "```lua", "print(1,2)", "```"], name="x.md")
        before = body(display, session)
        result = session.execute_current_block()

        assert result.status is ExecutionStatus.UNSUPPORTED
        assert body(display, session) == before
        assert display.notifications[-1].startswith(NO_BLOCK_MESSAGE)
        assert "lua" in display.notifications[-1]

    def test_navigation_clears_code_section(self, display, session):
        """Moving away and back shows the plain slide again"""
        session.next()
        session.execute_current_block()
        session.previous()
        session.next()

        assert body(display, session) == ["```python", "print(1,2)", "```"]

    def test_custom_code_heading(self, display):
        """The appended heading comes from settings"""
        settings = AppSettings(code_heading="## Output")
        session = Session.start(display, ["# A", "```python", "print(7)", "```"], settings=settings)
        session.execute_current_block()

        assert body(display, session)[-3:] == ["## Output", "", "7"]


class TestResize:
    """Test geometry updates on resize"""

    def test_resize_reapplies_layout(self, display, session):
        """Every surface gets the geometry for the new size"""
        display.resize(120, 40)

        layout = windows_configure(120, 40)
        for name, handle in session.surfaces.items():
            assert display.geometry_get(handle) == layout[name]

    def test_resize_recenters_next_render(self, display, session):
        """The title is centered for the new width on the next render"""
        display.resize(120, 40)
        session.next()

        title = "# Title 2"
        assert header(display, session) == [" " * ((120 - len(title)) // 2) + title]

    def test_resize_after_quit_is_noop(self, display, session):
        """on_resize() on a torn-down session does nothing"""
        session.quit()
        session.on_resize()

        assert display.surfaces == {}

    def test_resize_with_lost_body(self, display, session):
        """A missing body surface makes resize a no-op"""
        header_handle = session.surfaces[SurfaceName.HEADER]
        before = display.geometry_get(header_handle)
        del display.surfaces[session.surfaces[SurfaceName.BODY].id]

        display.resize(100, 30)

        assert display.geometry_get(header_handle) == before


class TestQuit:
    """Test teardown"""

    def test_quit_closes_everything(self, display, session):
        """quit() closes the surfaces and removes every hook"""
        session.quit()

        assert session.state is SessionState.IDLE
        assert display.surfaces == {}
        assert display.listeners_count() == 0

    def test_quit_restores_options(self, display, session):
        """cmdheight returns to its prior value"""
        session.quit()

        assert display.options["cmdheight"] == 1

    def test_quit_key(self, display, session):
        """q quits"""
        display.press("q")

        assert session.state is SessionState.IDLE

    def test_quit_twice(self, display, session):
        """A second quit() is harmless"""
        session.quit()
        session.quit()

        assert session.state is SessionState.IDLE

    def test_closing_body_quits(self, display, session):
        """Closing the body surface from the host ends the presentation"""
        display.close(session.surfaces[SurfaceName.BODY])

        assert session.state is SessionState.IDLE
        assert display.surfaces == {}
        assert display.options["cmdheight"] == 1

    def test_surface_already_gone(self, display, session):
        """Surfaces closed behind the session's back are skipped"""
        del display.surfaces[session.surfaces[SurfaceName.FOOTER].id]

        session.quit()

        assert display.surfaces == {}

    def test_keys_unbound_after_quit(self, display, session):
        """No key reaches a finished session"""
        session.quit()

        assert not display.press("n", handle=session.surfaces[SurfaceName.BODY])
        assert session.current_index == 1

    def test_operations_after_quit(self, display, session):
        """Navigation and execution on a finished session touch nothing"""
        session.quit()

        assert session.next() == 1
        assert session.execute_current_block() is None
        assert display.notifications == []


class TestDebugMode:
    """Test the extra tracing enabled by settings.debug_mode"""

    def test_debug_flag_from_settings(self, display):
        """debug_mode switches on session tracing"""
        session = Session(display, Deck(), settings=AppSettings(debug_mode=True))

        assert session.debug is True

    def test_trace_when_enabled(self, display, trace):
        """Surfaces, options and renders are traced"""
        Session.start(display, SCENARIO, name="talk.md", settings=AppSettings(debug_mode=True))

        text = "".join(trace)
        assert "Created body surface" in text
        assert "Option cmdheight: 1 -> 0" in text
        assert "Rendering slide 1/2" in text

    def test_no_trace_by_default(self, display, trace):
        """Without debug_mode the per-render trace stays quiet"""
        Session.start(display, SCENARIO, name="talk.md", settings=AppSettings(debug_mode=False))

        text = "".join(trace)
        assert "Rendering slide" not in text
        assert "Created body surface" not in text
        assert "Presenting 'talk.md'" in text
