"""Shell indirection and process-tree control for spawned commands."""
from __future__ import annotations

import logging
import os
import signal
import subprocess
from typing import Any, Dict, List, Optional

from xn.utils.config_loader import Settings

logger = logging.getLogger(__name__)


def is_windows(platform: Optional[str] = None) -> bool:
    return (platform or os.name) == "nt"


def get_shell_command(command: str, settings: Optional[Settings] = None, platform: Optional[str] = None) -> List[str]:
    """
    Get the argv that runs ``command`` through the platform shell.

    Args:
        command: Raw command string, passed to the shell unchanged.
        settings: Source of the shell paths (defaults when omitted).
        platform: ``os.name`` override, used by tests.

    Returns:
        list: Shell executable, its "run this string" switch, and the command.
    """
    settings = settings or Settings()
    if is_windows(platform):
        return [settings.windows_shell, "/c", command]
    return [settings.posix_shell, "-c", command]


def popen_options(platform: Optional[str] = None) -> Dict[str, Any]:
    """Extra Popen arguments that put the child in its own process group on POSIX."""
    if is_windows(platform):
        return {}
    return {"start_new_session": True}


def kill_process_tree(process: subprocess.Popen) -> None:
    """Kill ``process`` and, on POSIX, every process in its group."""
    if process.poll() is not None:
        return

    if is_windows():
        process.kill()
        return

    try:
        # start_new_session makes the child the leader of its own group
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug("Process group %s already gone", process.pid)
    except PermissionError:
        process.kill()
