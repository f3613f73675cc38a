"""Type definitions for command runs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class RunRequest:
    """What to run and how often."""

    count: int
    command: str
    silent: bool = False
    timeout: Optional[float] = None


@dataclass(slots=True, frozen=True)
class RunOutcome:
    """Recorded result of a single run of the command."""

    index: int
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: float
    success: bool
    timed_out: bool = False

    @classmethod
    def completed(cls, index: int, exit_code: int, stdout: str, stderr: str, duration_ms: float) -> "RunOutcome":
        return cls(
            index=index,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=duration_ms,
            success=exit_code == 0,
        )

    @classmethod
    def spawn_failure(cls, index: int, error: BaseException, duration_ms: float) -> "RunOutcome":
        """Outcome for a command that could not be launched or awaited."""
        return cls(
            index=index,
            exit_code=-1,
            stdout="",
            stderr=str(error) or error.__class__.__name__,
            duration_ms=duration_ms,
            success=False,
        )

    @classmethod
    def timeout(cls, index: int, stdout: str, stderr: str, duration_ms: float, limit: float) -> "RunOutcome":
        """Outcome for a command killed after exceeding its time limit."""
        message = f"timeout: command exceeded {limit:g}s"
        if stderr and not stderr.endswith("\n"):
            stderr += "\n"
        return cls(
            index=index,
            exit_code=-1,
            stdout=stdout,
            stderr=f"{stderr}{message}",
            duration_ms=duration_ms,
            success=False,
            timed_out=True,
        )
