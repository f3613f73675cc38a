"""Interactive terminal printer built on rich."""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.status import Status
from rich.text import Text

from xn.types import RunOutcome
from xn.ui.core import PROG, Printer

BAR = "│"
INDENT = "  "


class TUI(Printer):
    """Spinner per run, followed by a framed block with the run's output."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)
        self._status: Optional[Status] = None
        self._count = 0

    def show_intro(self, count: int) -> None:
        self._count = count
        self.console.print(Text.assemble(("┌  ", "dim"), (f" {PROG} {count} ", "white on blue")))

    def start_run(self, index: int, count: int) -> None:
        self._stop_status()
        self._status = self.console.status("Executing command...", spinner="dots")
        self._status.start()

    def finish_run(self, outcome: RunOutcome) -> None:
        self._stop_status()
        if outcome.success:
            glyph, style = "◇", "green"
        else:
            glyph, style = "▲", "red"
        label = f"Run {outcome.index}/{self._count or outcome.index} completed (exit code {outcome.exit_code})"
        if outcome.timed_out:
            label = f"Run {outcome.index}/{self._count or outcome.index} timed out"
        self.console.print(
            Text.assemble(
                (f"{glyph}  ", style),
                label,
                (f" in {outcome.duration_ms:.1f} ms", "dim"),
            )
        )

    def print_result(self, outcome: RunOutcome) -> None:
        self._bar()
        self._line(Text.assemble((" exit code ", "white on magenta"), " ", (str(outcome.exit_code), "bold white")))

        if outcome.stdout:
            self._bar()
            self._line(Text(" stdout ", style="white on blue"))
            for line in _lines(outcome.stdout):
                self._line(Text(INDENT + line, style="white"))

        if outcome.stderr:
            if not outcome.stdout:
                self._bar()
            self._line(Text(" stderr ", style="white on red"))
            for line in _lines(outcome.stderr):
                self._line(Text(INDENT + line, style="red"))

        if not outcome.stdout and not outcome.stderr:
            self._bar()
            self._line(Text(INDENT + "(no output)", style="dim"))

    def show_outro(self) -> None:
        self._stop_status()
        self.console.print(Text.assemble(("└  ", "dim"), ("✓ Completed", "green")))

    def show_cancelled(self) -> None:
        self._stop_status()
        self.console.print(Text.assemble(("■  ", "red"), "Canceled"))

    def _stop_status(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def _bar(self) -> None:
        self.console.print(Text(BAR, style="dim"))

    def _line(self, text: Text) -> None:
        self.console.print(Text(BAR + " ", style="dim") + text)


def _lines(stream: str) -> list[str]:
    """Split captured output into display lines, ignoring the final newline."""
    if stream.endswith("\n"):
        stream = stream[:-1]
    return stream.split("\n")
