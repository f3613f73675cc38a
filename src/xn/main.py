# main.py
import argparse
import logging
import sys
from typing import List, NoReturn, Optional

from xn import __version__
from xn.cancellation import CancellationToken, RunCancelled, cancel_on_signals
from xn.errors import UsageError
from xn.executor import execute
from xn.types import RunRequest
from xn.ui import TUI, show_help, show_version
from xn.utils.arg_validator import parse_count, parse_timeout
from xn.utils.config_loader import Settings, load_settings

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports problems as UsageError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="xn", add_help=False)
    parser.add_argument("-n", "--count", type=str, default=None,
                        help="Number of times to execute the command")
    parser.add_argument("-s", "--silent", action="store_true",
                        help="Suppress per-run output")
    parser.add_argument("-t", "--timeout", type=str, default=None,
                        help="Kill a run that takes longer than this many seconds")
    parser.add_argument("-h", "--help", action="store_true", help="Show help information")
    parser.add_argument("-v", "--version", action="store_true", help="Show version information")
    parser.add_argument("command", nargs="*", help="Command to execute")
    return parser


def parse_cli_args(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> Optional[RunRequest]:
    """
    Parse CLI arguments into a run request.

    Returns:
        RunRequest, or None when help or version was shown instead.

    Raises:
        UsageError: If an option is malformed.
        SystemExit: With status 1, after showing help, if no command was given.
    """
    settings = settings or Settings()
    args, unknown = build_parser().parse_known_args(argv)

    if args.help:
        show_help()
        return None

    if args.version:
        show_version(__version__)
        return None

    if unknown:
        logger.warning("Ignoring unknown options: %s", " ".join(unknown))

    if not args.command or not args.command[0]:
        show_help()
        sys.exit(1)

    command = args.command[0]
    if len(args.command) > 1:
        logger.warning("Only the first positional argument is run; quote the whole command. Ignoring: %s",
                       " ".join(args.command[1:]))

    timeout = parse_timeout(args.timeout)
    if timeout is None:
        timeout = settings.timeout_seconds

    return RunRequest(
        count=parse_count(args.count, default=settings.default_count),
        command=command,
        silent=args.silent,
        timeout=timeout,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the xn command line and return the process exit status."""
    try:
        settings = load_settings()
        logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)

        try:
            request = parse_cli_args(argv, settings)
        except UsageError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            show_help()
            return 1

        if request is None:
            return 0

        logger.debug("Resolved request: %s", request)
        token = CancellationToken()
        with cancel_on_signals(token):
            execute(request, printer=TUI(), settings=settings, token=token)
    except (RunCancelled, KeyboardInterrupt):
        return 0
    except Exception as exc:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"An unexpected error occurred: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
