"""Delimited, guaranteed-complete writes of received payloads.

A single ``write`` may transfer fewer bytes than requested, so every write
here loops until the whole buffer has gone out. There is no recovery for a
broken output stream: any failure raises ``OutputWriteError``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from mq_tool.core.errors import OutputWriteError
from mq_tool.core.logging import hexdump
from mq_tool.core.models import Delimiter
from mq_tool.core.utils import format_timestamp

logger = logging.getLogger(__name__)

STDOUT_FILENO = 1

Writer = Callable[[int, bytes], int]


def write_all(fd: int, data: bytes, what: str = "message", writer: Writer = os.write) -> int:
    """Write every byte of ``data`` to ``fd``.

    Args:
        fd: Output file descriptor.
        data: Bytes to write. May be empty.
        what: Label used in error messages.
        writer: Low-level write function (``os.write``).

    Returns:
        Number of bytes written, always ``len(data)``.

    Raises:
        OutputWriteError: The write failed or stopped making progress.
    """
    view = memoryview(data)
    written = 0
    while written < len(view):
        try:
            count = writer(fd, view[written:])
        except OSError as e:
            raise OutputWriteError(what, e.strerror or str(e)) from e
        if count <= 0:
            raise OutputWriteError(what, f"no progress after {written} of {len(view)} bytes")
        written += count
    return written


class Framer:
    """Writes each payload followed by the invocation's delimiter."""

    def __init__(
        self,
        delimiter: Delimiter = Delimiter.NEWLINE,
        fd: int = STDOUT_FILENO,
        timestamp: bool = False,
        writer: Writer = os.write,
    ) -> None:
        self._delimiter = delimiter
        self._fd = fd
        self._timestamp = timestamp
        self._writer = writer

    @property
    def delimiter(self) -> Delimiter:
        return self._delimiter

    def emit(self, payload: bytes) -> None:
        """Write one payload and its delimiter to the output descriptor.

        Empty payloads still produce their delimiter.
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(hexdump(payload))

        if self._timestamp:
            write_all(self._fd, f"{format_timestamp()} ".encode(), "timestamp", self._writer)
        write_all(self._fd, payload, "message", self._writer)
        if self._delimiter is not Delimiter.NONE:
            write_all(self._fd, self._delimiter.byte, "delimiter", self._writer)
