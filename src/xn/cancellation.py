"""
Cancellation of an in-progress run loop.

The loop owns a CancellationToken; the signal handler installed by
``cancel_on_signals`` is the only thing that trips it. A child that is
running when cancellation arrives is killed together with its process group;
the executor reaps it while RunCancelled unwinds.
"""
from __future__ import annotations

import logging
import signal
import subprocess
from contextlib import contextmanager
from typing import Iterator, Optional

from xn.shell import kill_process_tree

logger = logging.getLogger(__name__)

CANCEL_SIGNALS = ("SIGTSTP", "SIGINT", "SIGTERM")


class RunCancelled(Exception):
    """Raised into the run loop when the user asks to stop."""


class CancellationToken:
    """Cancellation flag shared by the signal adapter and the run loop."""

    def __init__(self) -> None:
        self._cancelled = False
        self._process: Optional[subprocess.Popen] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def attach(self, process: subprocess.Popen) -> None:
        self._process = process

    def detach(self) -> None:
        self._process = None

    def cancel(self) -> None:
        self._cancelled = True
        process = self._process
        if process is None:
            return
        logger.debug("Killing in-flight process %s", process.pid)
        # reaped by the Popen context in the executor once RunCancelled unwinds it
        kill_process_tree(process)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RunCancelled("run cancelled")


@contextmanager
def cancel_on_signals(token: CancellationToken) -> Iterator[CancellationToken]:
    """
    Route SIGTSTP (Ctrl+Z), SIGINT (Ctrl+C) and SIGTERM to ``token`` while the block runs.

    The handler only cancels the token, which kills the attached child. The
    run loop notices the flag at its next check and raises RunCancelled, so
    no exception is injected between spawning a child and attaching it.
    Signals the platform does not have are skipped.
    """
    def _on_signal(signum, frame):
        logger.debug("Received signal %s, cancelling", signum)
        token.cancel()

    previous = {}
    for name in CANCEL_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            previous[signum] = signal.signal(signum, _on_signal)
    try:
        yield token
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
