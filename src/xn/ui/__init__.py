"""Terminal presentation for xn runs."""

from xn.ui.core import Printer, show_help, show_version
from xn.ui.tui import TUI

__all__ = ["Printer", "TUI", "show_help", "show_version"]
