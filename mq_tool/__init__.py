"""mq - use POSIX message queues from the shell."""

__version__ = "1.0.0"

# Re-export core components for convenience
from mq_tool.config import Settings, get_settings
from mq_tool.core import (
    # Models
    AccessMode,
    Command,
    CommandDescriptor,
    Delimiter,
    ErrorKind,
    # Components
    Framer,
    Message,
    # Errors
    MessageQueueError,
    OperationInterruptedError,
    OutputWriteError,
    ProtocolViolationError,
    QueueAlreadyExistsError,
    QueueAttributes,
    QueueHandle,
    QueueNotFoundError,
    QueuePermissionError,
    WouldBlockError,
    unlink_queue,
)
from mq_tool.dispatcher import CommandDispatcher

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
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
    # Models
    "AccessMode",
    "Command",
    "CommandDescriptor",
    "Delimiter",
    "Message",
    "QueueAttributes",
    # Components
    "Framer",
    "QueueHandle",
    "unlink_queue",
    "CommandDispatcher",
]
