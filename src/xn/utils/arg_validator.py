"""
Argument coercion for the xn command line.
"""
import logging
import re
from typing import Any, Optional

from xn.errors import UsageError

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_count(raw: Any, default: int = 1) -> int:
    """
    Turn the --count value into a run count.

    Leading digits are accepted ("5x" gives 5). Anything else, and any count
    below 1, falls back to ``default``.

    Args:
        raw: Value given on the command line, or None when the flag was absent.
        default: Count used when ``raw`` is missing or unusable.

    Returns:
        int: A count of at least 1.
    """
    if raw is None:
        return default

    match = _LEADING_INT.match(str(raw))
    if not match:
        logger.warning("Invalid count %r, falling back to %d", raw, default)
        return default

    count = int(match.group(1))
    if count < 1:
        logger.warning("Count must be at least 1, got %d; falling back to %d", count, default)
        return default
    return count


def parse_timeout(raw: Any) -> Optional[float]:
    """Return a positive number of seconds, or None when no limit is requested."""
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise UsageError(f"--timeout must be a number of seconds, got: {raw!r}") from None
    if value <= 0:
        raise UsageError(f"--timeout must be greater than 0, got: {raw!r}")
    return value
