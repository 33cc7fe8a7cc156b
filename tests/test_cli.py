"""
Command line pipeline tests

Tests env_check/source_parse/deck_report without starting curses.
"""

import pytest

import present.__main__ as cli
from present.__main__ import deck_outline, env_check, main, source_parse
from present.config import appsettings
from present.lib.display import MemoryDisplay
from present.lib.log import state_connectToLogger
from present.models.state import ProgramState, pipeline


TALK = """intro line
# Welcome
Hello there

## Running code
```python
print("hi")
```
"""


@pytest.fixture(autouse=True)
def logger_detached():
    yield
    state_connectToLogger(None)


@pytest.fixture
def talk_file(tmp_path):
    path = tmp_path / "talk.md"
    path.write_text(TALK, encoding="utf-8")
    return path


class TestPipelineStages:
    """Test individual pipeline stages"""

    def test_env_check_ok(self, talk_file):
        """An existing file passes the environment check"""
        state = env_check(ProgramState(inputFile=str(talk_file)))

        assert state.envOK is True
        assert state.inputSourceFile == talk_file

    def test_env_check_missing(self, tmp_path, capsys):
        """A missing file exits with status 1"""
        with pytest.raises(SystemExit) as excinfo:
            env_check(ProgramState(inputFile=str(tmp_path / "nope.md")))

        assert excinfo.value.code == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_source_parse(self, talk_file):
        """Parsing produces the deck and keeps the raw lines"""
        state = pipeline(ProgramState(inputFile=str(talk_file)), env_check, source_parse)

        assert state.sourceLines[0] == "intro line"
        assert len(state.deck) == 3
        assert state.deck.slides[2].blocks[0].body == 'print("hi")'

    def test_stages_do_not_mutate_input(self, talk_file):
        """Each stage works on a copy of the state"""
        initial = ProgramState(inputFile=str(talk_file))
        pipeline(initial, env_check, source_parse)

        assert initial.envOK is False
        assert initial.deck is None

    def test_outline(self, talk_file):
        """One outline line per slide"""
        state = pipeline(ProgramState(inputFile=str(talk_file)), env_check, source_parse)
        outline = deck_outline(state)

        assert outline[0] == "talk.md: 3 slides"
        assert "(untitled)" in outline[1]
        assert "# Welcome" in outline[2]
        assert "blocks: python" in outline[3]


class TestMain:
    """Test the entry point"""

    def test_dump(self, talk_file, capsys):
        """--dump prints the outline and does not present"""
        state = main([str(talk_file), "--dump"])

        out = capsys.readouterr().out
        assert out.startswith("talk.md: 3 slides")
        assert state.presentResult["slide_count"] == 3
        assert state.presentResult["status"] is True

    def test_missing_file(self, tmp_path):
        """main() exits 1 for a missing file"""
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "missing.md"), "--dump"])

        assert excinfo.value.code == 1

    def test_verbosity_counted(self, talk_file):
        """-vv raises verbosity to 3"""
        state = main([str(talk_file), "--dump", "-vv"])

        assert state.verbosity == 3

    def test_debug_mode_raises_verbosity(self, talk_file, monkeypatch):
        """debug_mode in settings implies the most verbose logging"""
        monkeypatch.setattr(appsettings, "debug_mode", True)
        state = main([str(talk_file), "--dump"])

        assert state.verbosity == 3


class ScriptedDisplay(MemoryDisplay):
    """MemoryDisplay standing in for curses: run() replays keys on the body"""

    keys = ["n", "n", "q"]

    def __init__(self, screen):
        super().__init__(columns=80, lines=24)

    def run(self):
        for key in self.keys:
            self.press(key)


class TestPresent:
    """Test the interactive stage with the terminal replaced"""

    @pytest.fixture
    def terminal(self, monkeypatch):
        monkeypatch.setattr(cli, "CursesDisplay", ScriptedDisplay)
        monkeypatch.setattr(cli.curses, "wrapper", lambda present: present(None))
        monkeypatch.setattr(appsettings, "log_file", None)

    def test_present(self, talk_file, terminal):
        """Keys drive the session; the final slide is reported"""
        state = main([str(talk_file)])

        assert state.presentResult == {"status": True, "slide_count": 3, "final_index": 3}

    def test_deck_parsed_once(self, talk_file, terminal, monkeypatch):
        """The deck from source_parse is presented as is"""

        def parse_again(*args, **kwargs):
            raise AssertionError("document parsed a second time")

        monkeypatch.setattr("present.lib.presenter.Parser", parse_again)
        state = main([str(talk_file)])

        assert state.presentResult["final_index"] == 3
