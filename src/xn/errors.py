"""Exceptions raised by the xn command line tool."""


class XnError(Exception):
    """Base class for xn errors."""


class UsageError(XnError):
    """Raised when the command line cannot be turned into a run request."""
