"""Entry point for the mq command-line tool."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import TYPE_CHECKING, NoReturn

from pydantic import ValidationError

if TYPE_CHECKING:
    from mq_tool.core.models import CommandDescriptor, Delimiter

logger = logging.getLogger(__name__)

PROG_NAME = "mq"

EPILOG = """\
commands:
  create    Create a POSIX message queue
  info      Print information about an existing message queue
  unlink    Delete a message queue
  send      Send a message to a message queue
  recv      Receive and print a message from a message queue

delimiters:
  n         new line (LF) [default]
  z         zero (NUL)
  x         no delimiter

examples:
  mq create /myqueue
  mq send /myqueue "hello" -n
  mq info /myqueue
  mq recv /myqueue
  mq unlink /myqueue
"""


def _queue_name(value: str) -> str:
    """argparse type for queue names."""
    from mq_tool.core.models import validate_queue_name

    try:
        return validate_queue_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int(value: str) -> int:
    """argparse type for sizes and counts (>= 1)."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _priority(value: str) -> int:
    """argparse type for message priorities (>= 0)."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid priority: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"PRIO must be >= 0, got {number}")
    return number


def _delimiter(value: str) -> Delimiter:
    """argparse type for delimiter letters."""
    from mq_tool.core.models import Delimiter

    try:
        return Delimiter.from_code(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    from mq_tool import __version__
    from mq_tool.config import get_settings
    from mq_tool.core.models import Delimiter

    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="A command line tool to use Posix Message Queues from the shell",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"{PROG_NAME} {__version__}",
    )

    # Options shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("qname", type=_queue_name, help="Queue name, starting with '/'")
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Produce verbose output",
    )

    # Options for send and recv
    exchange = argparse.ArgumentParser(add_help=False)
    exchange.add_argument(
        "-n",
        "--non-blocking",
        dest="blocking",
        action="store_false",
        help="Do not block",
    )
    exchange.add_argument(
        "-t",
        "--timestamp",
        action="store_true",
        help="Print a timestamp before lines of data",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="COMMAND",
    )
    subparsers.required = True

    # Create command
    create_parser = subparsers.add_parser(
        "create",
        parents=[common],
        help="Create a POSIX message queue",
    )
    create_parser.add_argument(
        "-s",
        "--msgsize",
        metavar="SIZE",
        type=_positive_int,
        default=settings.default_max_message_size,
        help=f"Message size in bytes (default: {settings.default_max_message_size})",
    )
    create_parser.add_argument(
        "-m",
        "--maxmsg",
        metavar="NUMBER",
        type=_positive_int,
        default=settings.default_max_messages,
        help=f"Maximum number of messages in queue (default: {settings.default_max_messages})",
    )

    # Info and unlink commands
    subparsers.add_parser(
        "info",
        parents=[common],
        help="Print information about an existing message queue",
    )
    subparsers.add_parser(
        "unlink",
        parents=[common],
        help="Delete a message queue",
    )

    # Send command
    send_parser = subparsers.add_parser(
        "send",
        parents=[common, exchange],
        help="Send a message to a message queue",
    )
    send_parser.add_argument("message", help="Message to send")
    send_parser.add_argument(
        "-p",
        "--priority",
        metavar="PRIO",
        type=_priority,
        default=0,
        help="Use priority PRIO, PRIO >= 0",
    )

    # Recv command
    recv_parser = subparsers.add_parser(
        "recv",
        parents=[common, exchange],
        help="Receive and print a message from a message queue",
    )
    recv_parser.add_argument(
        "-f",
        "--follow",
        action="store_true",
        help="Print messages as they are received",
    )
    recv_parser.add_argument(
        "-d",
        "--delimiter",
        metavar="CHAR",
        type=_delimiter,
        default=Delimiter.NEWLINE,
        help="Character to delimit the end of messages: n, z or x (default: n)",
    )

    return parser


def build_descriptor(args: argparse.Namespace) -> CommandDescriptor:
    """Turn parsed arguments into a CommandDescriptor.

    Args:
        args: Parsed command line arguments.

    Returns:
        The validated descriptor.
    """
    from mq_tool.core.models import CommandDescriptor, Delimiter

    message = getattr(args, "message", None)
    fields = {
        "command": args.command,
        "queue_name": args.qname,
        "verbose": args.verbose,
        "timestamp": getattr(args, "timestamp", False),
        "blocking": getattr(args, "blocking", True),
        "follow": getattr(args, "follow", False),
        "priority": getattr(args, "priority", 0),
        "delimiter": getattr(args, "delimiter", Delimiter.NEWLINE),
        "payload": os.fsencode(message) if message is not None else None,
    }
    if args.command == "create":
        fields["max_messages"] = args.maxmsg
        fields["max_message_size"] = args.msgsize
    return CommandDescriptor(**fields)


def run_command(args: argparse.Namespace) -> int:
    """Configure logging and dispatch one command.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    from mq_tool.config import get_settings
    from mq_tool.core.logging import configure_logging
    from mq_tool.dispatcher import CommandDispatcher

    settings = get_settings()
    level = logging.DEBUG if args.verbose else settings.log_level
    configure_logging(level=level, json_format=settings.log_json)

    try:
        descriptor = build_descriptor(args)
    except ValidationError as e:
        logger.error(f"Invalid arguments: {e}")
        return 1

    return CommandDispatcher(settings).dispatch(descriptor)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point with subcommand support."""
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(run_command(args))


if __name__ == "__main__":
    main()
