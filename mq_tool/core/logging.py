"""Diagnostic logging for the mq tool.

Standard output is reserved for program data (received payloads and the
``info`` line), so every diagnostic goes to standard error through the
root logger configured here.

Features:
    - Millisecond-timestamped trace lines
      (``2024-01-15 10:30:00.123 Opening mq /q (O_RDONLY)``)
    - JSON structured logging format
    - Hex dump helper for payload traces
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import TextIO

from mq_tool.core.utils import format_timestamp, hexlify

# Bytes per hex dump line
HEXDUMP_WIDTH = 16


def hexdump(payload: bytes, width: int = HEXDUMP_WIDTH) -> str:
    """Render a payload as hex dump lines for the verbose trace.

    Args:
        payload: Raw message bytes.
        width: Bytes per line.

    Returns:
        Hex pairs separated by spaces, one line per ``width`` bytes.
        An empty payload renders as ``(empty)``.
    """
    if not payload:
        return "(empty)"
    return "\n".join(
        hexlify(payload[offset : offset + width]) for offset in range(0, len(payload), width)
    )


class TraceFormatter(logging.Formatter):
    """Formatter producing timestamped trace lines.

    Records at WARNING and above carry their level name so errors stand out
    from verbose tracing.
    """

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Format the record time as local time with millisecond precision."""
        return format_timestamp(datetime.fromtimestamp(record.created))

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as ``<timestamp> [LEVEL: ]message``.

        Args:
            record: The log record to format.

        Returns:
            The formatted trace line, with any traceback appended.
        """
        prefix = self.formatTime(record)
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = f"{record.levelname.lower()}: {message}"
        line = f"{prefix} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted log message.
        """
        log_data: dict[str, str] = {
            "timestamp": format_timestamp(datetime.fromtimestamp(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(
    level: str | int = "WARNING",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_format: Use JSON format for structured logging.
        stream: Diagnostic stream. Defaults to ``sys.stderr``.
    """
    if isinstance(level, str):
        level = level.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setLevel(level)

    formatter: logging.Formatter
    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = TraceFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
