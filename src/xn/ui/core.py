"""Presentation contract and the help/version screens."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from xn.types import RunOutcome

PROG = "xn"

_OPTIONS = [
    ("-n, --count <number>", "Number of times to execute the command (default: 1)"),
    ("-s, --silent", "Silent mode - suppress output"),
    ("-t, --timeout <seconds>", "Kill a run that takes longer than this"),
    ("-h, --help", "Show help information"),
    ("-v, --version", "Show version information"),
]


class Printer(ABC):
    """Everything the run loop needs to tell the user."""

    @abstractmethod
    def show_intro(self, count: int) -> None:
        """Announce how many runs are planned."""

    @abstractmethod
    def start_run(self, index: int, count: int) -> None:
        """Show that run ``index`` is executing."""

    @abstractmethod
    def finish_run(self, outcome: RunOutcome) -> None:
        """Replace the executing indicator with the run's completion state."""

    @abstractmethod
    def print_result(self, outcome: RunOutcome) -> None:
        """Render the exit code and captured output of one run."""

    @abstractmethod
    def show_outro(self) -> None:
        """Announce that all runs finished."""

    @abstractmethod
    def show_cancelled(self) -> None:
        """Stop any progress indicator after the user cancelled."""


def show_version(version: str, console: Optional[Console] = None) -> None:
    console = console or Console(highlight=False)
    console.print(f"{PROG} version {version}", style="green")


def show_help(console: Optional[Console] = None) -> None:
    console = console or Console(highlight=False)

    console.print(Text.assemble(("Usage:", "bold cyan"), " ", (f"{PROG} [options] <command>", "white")))
    console.print()
    console.print(Text("Options:", style="bold cyan"))

    options = Table.grid(padding=(0, 3))
    options.add_column(style="yellow")
    options.add_column(style="dim")
    for flags, description in _OPTIONS:
        options.add_row(f"  {flags}", description)
    console.print(options)

    console.print()
    console.print(Text("Example:", style="bold cyan"))
    console.print(Text(f'  {PROG} -n 5 "echo Hello, World!"', style="green"))
