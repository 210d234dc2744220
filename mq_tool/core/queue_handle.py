"""Scoped ownership of one open POSIX message queue descriptor.

Every call into ``posix_ipc`` goes through ``_translate_ipc_errors`` so that
callers only ever see ``MessageQueueError`` subclasses. A ``QueueHandle`` is a
context manager; leaving the ``with`` block closes the descriptor exactly
once, whatever happened inside it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

import posix_ipc

from mq_tool.config import get_settings
from mq_tool.core.errors import (
    InvalidQueueArgumentError,
    OperationInterruptedError,
    QueueAlreadyExistsError,
    QueueNotFoundError,
    QueueOSError,
    QueuePermissionError,
    WouldBlockError,
)
from mq_tool.core.models import AccessMode, QueueAttributes
from mq_tool.core.utils import format_open_flags

logger = logging.getLogger(__name__)


@contextmanager
def _translate_ipc_errors(
    name: str,
    operation: str,
    *,
    creating: bool = False,
) -> Iterator[None]:
    """Translate ``posix_ipc`` and OS failures into the tool's error kinds.

    Args:
        name: Queue name, used in error messages.
        operation: Short operation label (``open``, ``send``, ...).
        creating: ExistentialError means the queue already exists rather
            than that it is missing.
    """
    try:
        yield
    except posix_ipc.ExistentialError as e:
        if creating:
            raise QueueAlreadyExistsError(name) from e
        raise QueueNotFoundError(name) from e
    except posix_ipc.PermissionsError as e:
        raise QueuePermissionError(name, operation) from e
    except posix_ipc.BusyError as e:
        raise WouldBlockError(name, operation) from e
    except (posix_ipc.SignalError, InterruptedError) as e:
        raise OperationInterruptedError(name, operation) from e
    except ValueError as e:
        raise InvalidQueueArgumentError(f"{operation} rejected for {name}: {e}") from e
    except posix_ipc.Error as e:
        raise QueueOSError(f"{operation} failed for {name}: {e}") from e
    except OSError as e:
        raise QueueOSError(f"{operation} failed for {name}: {e.strerror or e}") from e


class QueueHandle:
    """Exclusive owner of one open message queue.

    Use the ``open_create`` / ``open_existing`` constructors rather than
    building a handle directly.
    """

    def __init__(self, queue: posix_ipc.MessageQueue, name: str, access: str) -> None:
        self._queue = queue
        self._name = name
        self._access = access
        self._closed = False

    @classmethod
    def open_create(
        cls,
        name: str,
        max_messages: int,
        max_message_size: int,
        mode: int | None = None,
    ) -> QueueHandle:
        """Create a new queue, failing if the name is already taken.

        Args:
            name: Queue name, starting with ``/``.
            max_messages: Capacity of the queue in messages.
            max_message_size: Largest payload accepted, in bytes.
            mode: Permission bits. Defaults to ``Settings.create_mode``.

        Returns:
            A read/write handle on the new queue.

        Raises:
            QueueAlreadyExistsError: A queue with that name exists.
            InvalidQueueArgumentError: The kernel rejected the sizes.
        """
        if mode is None:
            mode = get_settings().create_mode

        logger.debug(f"Opening mq {name} (O_CREAT, O_RDWR, O_EXCL, {mode:o})")
        with _translate_ipc_errors(name, "create", creating=True):
            queue = posix_ipc.MessageQueue(
                name,
                flags=posix_ipc.O_CREX,
                mode=mode,
                max_messages=max_messages,
                max_message_size=max_message_size,
                read=True,
                write=True,
            )
        return cls(queue, name, "O_RDWR")

    @classmethod
    def open_existing(
        cls,
        name: str,
        access: AccessMode,
        blocking: bool = True,
    ) -> QueueHandle:
        """Open a queue that must already exist.

        Args:
            name: Queue name, starting with ``/``.
            access: READ_ONLY for receiving and queries, WRITE_ONLY for sending.
            blocking: When False, send/receive fail instead of waiting.

        Raises:
            QueueNotFoundError: No queue has that name.
            QueuePermissionError: The access mode is not permitted.
        """
        nonblock = "" if blocking else "O_NONBLOCK"
        logger.debug(f"Opening mq {name} ({format_open_flags(access.value, nonblock)})")

        with _translate_ipc_errors(name, "open"):
            queue = posix_ipc.MessageQueue(
                name,
                read=access is AccessMode.READ_ONLY,
                write=access is AccessMode.WRITE_ONLY,
            )

        handle = cls(queue, name, access.value)
        if not blocking:
            try:
                with _translate_ipc_errors(name, "setattr"):
                    queue.block = False
            except BaseException:
                handle.close()
                raise
        return handle

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def blocking(self) -> bool:
        return bool(self._queue.block)

    def fileno(self) -> int:
        """Return the queue descriptor, usable with ``select.poll`` on Linux."""
        return int(self._queue.mqd)

    def query_attributes(self) -> QueueAttributes:
        """Read the queue's current attributes from the kernel."""
        with _translate_ipc_errors(self._name, "getattr"):
            return QueueAttributes(
                max_messages=self._queue.max_messages,
                max_message_size=self._queue.max_message_size,
                current_messages=self._queue.current_messages,
            )

    def send(self, payload: bytes, priority: int = 0) -> None:
        """Enqueue one payload whole."""
        with _translate_ipc_errors(self._name, "send"):
            self._queue.send(payload, priority=priority)

    def receive(self) -> tuple[bytes, int]:
        """Dequeue the oldest highest-priority message."""
        with _translate_ipc_errors(self._name, "receive"):
            payload, priority = self._queue.receive()
        return payload, priority

    def close(self) -> None:
        """Release the descriptor. Later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        with _translate_ipc_errors(self._name, "close"):
            self._queue.close()

    def __enter__(self) -> QueueHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else self._access
        return f"QueueHandle({self._name!r}, {state})"


def unlink_queue(name: str) -> None:
    """Remove a queue name from the system.

    Holders that already have the queue open keep using it until they close.

    Raises:
        QueueNotFoundError: No queue has that name.
        QueuePermissionError: The caller may not remove it.
    """
    logger.debug(f"Deleting mq {name}")
    with _translate_ipc_errors(name, "unlink"):
        posix_ipc.unlink_message_queue(name)
