import io

import pytest
from rich.console import Console

from xn.types import RunOutcome
from xn.ui.core import Printer, show_help, show_version
from xn.ui.tui import TUI


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)


def _output(console):
    return console.file.getvalue()


class TestPrinterContract:
    def test_tui_is_a_printer(self):
        assert isinstance(TUI(), Printer)

    def test_printer_is_abstract(self):
        with pytest.raises(TypeError):
            Printer()


class TestTUIBanners:
    def test_intro_shows_count(self, console):
        TUI(console).show_intro(7)
        assert "xn 7" in _output(console)

    def test_outro(self, console):
        TUI(console).show_outro()
        assert "Completed" in _output(console)

    def test_cancelled(self, console):
        tui = TUI(console)
        tui.start_run(1, 2)
        tui.show_cancelled()
        assert "Canceled" in _output(console)

    def test_progress_shows_exit_code_and_duration(self, console):
        tui = TUI(console)
        tui.show_intro(3)
        tui.start_run(2, 3)
        tui.finish_run(RunOutcome.completed(2, 5, "", "", 12.34))
        out = _output(console)
        assert "Run 2/3 completed (exit code 5)" in out
        assert "12.3 ms" in out

    def test_progress_for_timeout(self, console):
        tui = TUI(console)
        tui.show_intro(1)
        tui.finish_run(RunOutcome.timeout(1, "", "", 1000.0, 1))
        assert "Run 1/1 timed out" in _output(console)


class TestTUIPrintResult:
    def test_exit_code_line(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "hi\n", "", 1.0))
        assert "exit code  0" in _output(console)

    def test_stdout_lines_indented(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "first\nsecond\n", "", 1.0))
        lines = _output(console).splitlines()
        assert " stdout " in _output(console)
        assert "│   first" in lines
        assert "│   second" in lines
        assert "stderr" not in _output(console)

    def test_trailing_newline_adds_no_blank_line(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "only\n", "", 1.0))
        lines = _output(console).splitlines()
        assert lines[-1] == "│   only"

    def test_carriage_returns_stay_on_one_line(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "10%\r50%\r100%\ndone\n", "", 1.0))
        body = [line for line in _output(console).splitlines() if line.startswith("│   ")]
        assert len(body) == 2
        assert body[1] == "│   done"

    def test_blank_lines_inside_output_kept(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "a\n\nb\n", "", 1.0))
        lines = _output(console).splitlines()
        assert [line.rstrip() for line in lines[-3:]] == ["│   a", "│", "│   b"]

    def test_stderr_section(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 2, "", "bad thing\n", 1.0))
        out = _output(console)
        assert " stderr " in out
        assert "│   bad thing" in out.splitlines()
        assert " stdout " not in out

    def test_both_streams(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 1, "out\n", "err\n", 1.0))
        out = _output(console)
        assert out.index(" stdout ") < out.index(" stderr ")

    def test_no_output_placeholder(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "", "", 1.0))
        assert "(no output)" in _output(console)

    def test_output_is_not_treated_as_markup(self, console):
        TUI(console).print_result(RunOutcome.completed(1, 0, "[red]not markup[/red]\n", "", 1.0))
        assert "[red]not markup[/red]" in _output(console)

    def test_spawn_failure_message(self, console):
        TUI(console).print_result(RunOutcome.spawn_failure(1, FileNotFoundError("No such file"), 0.5))
        out = _output(console)
        assert "exit code  -1" in out
        assert "No such file" in out


class TestHelpAndVersion:
    def test_help_lists_options(self, console):
        show_help(console)
        out = _output(console)
        assert "Usage: xn [options] <command>" in out
        for flag in ("--count", "--silent", "--timeout", "--help", "--version"):
            assert flag in out
        assert 'xn -n 5 "echo Hello, World!"' in out

    def test_version(self, console):
        show_version("1.2.3", console)
        assert _output(console).strip() == "xn version 1.2.3"
