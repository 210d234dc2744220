"""Shared utility functions for the mq tool.

Trace timestamps use local time with millisecond precision,
``2024-01-15 10:30:00.123``. Every call formats a fresh string; nothing is
cached between calls.
"""

from datetime import datetime


def format_timestamp(now: datetime | None = None) -> str:
    """Format a local timestamp with millisecond precision.

    Args:
        now: Moment to format. Defaults to the current local time.

    Returns:
        Timestamp string such as ``2024-01-15 10:30:00.123``.

    Example:
        >>> from datetime import datetime
        >>> format_timestamp(datetime(2024, 1, 15, 10, 30, 0, 123456))
        '2024-01-15 10:30:00.123'
    """
    if now is None:
        now = datetime.now()
    return f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond // 1000:03d}"


def hexlify(payload: bytes) -> str:
    """Render bytes as space-separated lowercase hex pairs.

    Example:
        >>> hexlify(b"hi\\x00")
        '68 69 00'
    """
    return " ".join(f"{byte:02x}" for byte in payload)


def format_open_flags(*flags: str) -> str:
    """Join open-flag names for trace messages, skipping empty entries."""
    return ", ".join(flag for flag in flags if flag)
