"""Bounded capture of a child's output streams."""
from __future__ import annotations

import logging
import threading
from functools import partial
from typing import IO

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def format_size(size: int) -> str:
    if size and size % (1024 * 1024) == 0:
        return f"{size // (1024 * 1024)}MB"
    if size and size % 1024 == 0:
        return f"{size // 1024}KB"
    return f"{size} bytes"


class LimitedBuffer:
    """Keeps at most ``limit`` bytes; anything past that is counted as truncated and dropped."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.truncated = False
        self._data = bytearray()

    def write(self, chunk: bytes) -> None:
        available = self.limit - len(self._data)
        if len(chunk) > available:
            self.truncated = True
            chunk = chunk[:max(available, 0)]
        self._data.extend(chunk)

    def getvalue(self) -> str:
        text = self._data.decode("utf-8", errors="replace").replace("\r\n", "\n")
        if self.truncated:
            text += f"\n[OUTPUT TRUNCATED: exceeded {format_size(self.limit)} limit]\n"
        return text


def start_reader(pipe: IO[bytes], buffer: LimitedBuffer) -> threading.Thread:
    """Drain ``pipe`` into ``buffer`` on a daemon thread until EOF."""

    def _drain() -> None:
        try:
            for chunk in iter(partial(pipe.read1, CHUNK_SIZE), b""):
                buffer.write(chunk)
        except (OSError, ValueError) as exc:
            # pipe closed under us while a cancelled run was torn down
            logger.debug("Stopped reading output: %s", exc)

    reader = threading.Thread(target=_drain, daemon=True)
    reader.start()
    return reader
