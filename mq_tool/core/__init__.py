"""Core components for the mq tool."""

from mq_tool.core.errors import (
    ErrorKind,
    InvalidQueueArgumentError,
    MessageQueueError,
    OperationInterruptedError,
    OutputWriteError,
    ProtocolViolationError,
    QueueAlreadyExistsError,
    QueueNotFoundError,
    QueueOSError,
    QueuePermissionError,
    UsageError,
    WouldBlockError,
)
from mq_tool.core.framer import Framer, write_all
from mq_tool.core.models import (
    AccessMode,
    Command,
    CommandDescriptor,
    Delimiter,
    Message,
    QueueAttributes,
)
from mq_tool.core.queue_handle import QueueHandle, unlink_queue
from mq_tool.core.readiness import Readiness, ReadinessWaiter, WaitResult

__all__ = [
    # Errors
    "ErrorKind",
    "MessageQueueError",
    "QueueAlreadyExistsError",
    "QueueNotFoundError",
    "QueuePermissionError",
    "WouldBlockError",
    "OperationInterruptedError",
    "ProtocolViolationError",
    "OutputWriteError",
    "InvalidQueueArgumentError",
    "QueueOSError",
    "UsageError",
    # Models
    "AccessMode",
    "Command",
    "CommandDescriptor",
    "Delimiter",
    "Message",
    "QueueAttributes",
    # Components
    "Framer",
    "write_all",
    "QueueHandle",
    "unlink_queue",
    "Readiness",
    "ReadinessWaiter",
    "WaitResult",
]
