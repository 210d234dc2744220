"""Send and receive operations on open queue handles.

``open_receive_session`` is the one place that performs the
open / query attributes / size receives sequence; one-shot receive and
follow mode both start from it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from mq_tool.core.errors import InvalidQueueArgumentError, ProtocolViolationError
from mq_tool.core.logging import hexdump
from mq_tool.core.models import AccessMode, Message, QueueAttributes
from mq_tool.core.queue_handle import QueueHandle

logger = logging.getLogger(__name__)


def send_message(handle: QueueHandle, payload: bytes, priority: int = 0) -> None:
    """Enqueue one payload on a write-capable handle.

    Blocks while the queue is full unless the handle is non-blocking.

    Args:
        handle: Handle opened with WRITE_ONLY access.
        payload: Message bytes, at most the queue's max_message_size.
        priority: Non-negative priority; higher is received first.

    Raises:
        WouldBlockError: Non-blocking handle and the queue is full.
        OperationInterruptedError: A signal interrupted the wait for space.
        InvalidQueueArgumentError: Payload too long or priority out of range.
    """
    if priority < 0:
        raise InvalidQueueArgumentError(
            f"send rejected for {handle.name}: priority must be >= 0, got {priority}"
        )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(hexdump(payload))
    handle.send(payload, priority)


@dataclass
class ReceiveSession:
    """An open read-only handle plus the receive capacity measured for it.

    The capacity is the queue's max_message_size, read once when the session
    opened. It is only valid for this handle; reopening the queue means
    opening a new session.
    """

    handle: QueueHandle
    attributes: QueueAttributes

    @property
    def capacity(self) -> int:
        return self.attributes.max_message_size

    def receive(self) -> Message:
        """Dequeue one message.

        Raises:
            WouldBlockError: Non-blocking session and the queue is empty.
            OperationInterruptedError: A signal interrupted the wait.
            ProtocolViolationError: The payload exceeds the session capacity.
        """
        payload, priority = self.handle.receive()
        if len(payload) > self.capacity:
            raise ProtocolViolationError(
                f"Received {len(payload)} bytes from {self.handle.name}, "
                f"larger than its message size of {self.capacity}"
            )
        return Message(payload=payload, priority=priority)


@contextmanager
def open_receive_session(name: str, blocking: bool = True) -> Iterator[ReceiveSession]:
    """Open a queue for receiving and size receives from its attributes.

    The handle is closed when the block exits, including on errors.

    Args:
        name: Queue name.
        blocking: When False, receives fail on an empty queue instead of waiting.

    Yields:
        A ReceiveSession bound to the freshly opened handle.
    """
    with QueueHandle.open_existing(name, AccessMode.READ_ONLY, blocking=blocking) as handle:
        attributes = handle.query_attributes()
        logger.debug(
            f"Receiving from {name} with a {attributes.max_message_size} byte buffer "
            f"({attributes.current_messages} queued)"
        )
        yield ReceiveSession(handle=handle, attributes=attributes)
