"""Sequential execution of a command through the platform shell."""
from __future__ import annotations

import logging
import subprocess
import threading
import time
from typing import List, Optional

from xn.cancellation import CancellationToken, RunCancelled
from xn.capture import LimitedBuffer, start_reader
from xn.shell import get_shell_command, kill_process_tree, popen_options
from xn.types import RunOutcome, RunRequest
from xn.ui.core import Printer
from xn.ui.tui import TUI
from xn.utils.config_loader import Settings

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds
READER_GRACE = 1.0  # seconds


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _wait(process: subprocess.Popen, timeout: Optional[float], token: Optional[CancellationToken]) -> int:
    """
    Wait for the process in short slices, checking the token between them.

    Raises:
        subprocess.TimeoutExpired: If ``timeout`` seconds pass first.
        RunCancelled: If the token was cancelled.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    while True:
        if token is not None:
            token.raise_if_cancelled()
        wait = POLL_INTERVAL
        if deadline is not None:
            wait = max(min(wait, deadline - time.monotonic()), 0)
        try:
            return process.wait(timeout=wait)
        except subprocess.TimeoutExpired:
            if deadline is not None and time.monotonic() >= deadline:
                raise


def _join(readers: List[threading.Thread], timeout: Optional[float] = None) -> None:
    for reader in readers:
        reader.join(timeout)


def execute_command(
    command: str,
    index: int,
    timeout: Optional[float] = None,
    settings: Optional[Settings] = None,
    token: Optional[CancellationToken] = None,
) -> RunOutcome:
    """
    Execute a command once and capture its output.

    Failures to launch or wait on the shell are returned as an outcome with
    exit code -1 rather than raised.

    Args:
        command: Raw command string handed to the shell.
        index: 1-based run number recorded on the outcome.
        timeout: Seconds after which the process tree is killed. None waits forever.
        settings: Shell paths and the per-stream output limit.
        token: Cancellation token that is told about the running child.

    Returns:
        RunOutcome: Exit code, captured streams and duration of the run.
    """
    start = time.perf_counter()
    settings = settings or Settings()
    argv = get_shell_command(command, settings)
    logger.debug("Run %d: spawning %s", index, argv)

    stdout = LimitedBuffer(settings.max_output_bytes)
    stderr = LimitedBuffer(settings.max_output_bytes)
    timed_out = False

    try:
        with subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            **popen_options(),
        ) as process:
            readers = [start_reader(process.stdout, stdout), start_reader(process.stderr, stderr)]
            try:
                if token is not None:
                    token.attach(process)
                _wait(process, timeout, token)
            except subprocess.TimeoutExpired:
                logger.warning("Run %d exceeded %ss, killing it", index, timeout)
                kill_process_tree(process)
                process.wait()
                timed_out = True
            except (RunCancelled, KeyboardInterrupt) as exc:
                # Popen.__exit__ waits on the child, so it must be gone first
                kill_process_tree(process)
                _join(readers, READER_GRACE)
                if isinstance(exc, KeyboardInterrupt):
                    raise RunCancelled("run interrupted") from None
                raise
            finally:
                if token is not None:
                    token.detach()
            _join(readers)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Run %d: failed to execute: %s", index, exc)
        return RunOutcome.spawn_failure(index, exc, _elapsed_ms(start))

    if stdout.truncated or stderr.truncated:
        logger.warning("Run %d: output truncated at %d bytes per stream", index, settings.max_output_bytes)
    if timed_out:
        return RunOutcome.timeout(index, stdout.getvalue(), stderr.getvalue(), _elapsed_ms(start), timeout)
    return RunOutcome.completed(index, process.returncode, stdout.getvalue(), stderr.getvalue(), _elapsed_ms(start))


def execute(
    request: RunRequest,
    printer: Optional[Printer] = None,
    settings: Optional[Settings] = None,
    token: Optional[CancellationToken] = None,
) -> List[int]:
    """
    Run ``request.command`` ``request.count`` times, one after the other.

    Every run happens regardless of how the previous one ended. The printer
    sees each outcome as soon as its run finishes.

    Returns:
        list: Exit codes in run order.

    Raises:
        RunCancelled: If the token was cancelled before or during a run.
    """
    printer = printer or TUI()
    token = token or CancellationToken()
    exit_codes: List[int] = []

    printer.show_intro(request.count)
    try:
        for i in range(1, request.count + 1):
            token.raise_if_cancelled()
            printer.start_run(i, request.count)
            outcome = execute_command(request.command, i, timeout=request.timeout, settings=settings, token=token)
            token.raise_if_cancelled()
            printer.finish_run(outcome)
            logger.debug("Run %d/%d: exit code %d in %.1f ms", i, request.count, outcome.exit_code, outcome.duration_ms)

            if not request.silent:
                printer.print_result(outcome)
            exit_codes.append(outcome.exit_code)
    except RunCancelled:
        printer.show_cancelled()
        raise

    printer.show_outro()
    logger.debug("Completed %d runs", len(exit_codes))
    return exit_codes
