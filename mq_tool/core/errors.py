"""Custom exceptions for the mq command-line tool."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure kinds surfaced to the operator."""

    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    WOULD_BLOCK = "would_block"
    INTERRUPTED = "interrupted"
    PROTOCOL_VIOLATION = "protocol_violation"
    WRITE_FAILURE = "write_failure"
    INVALID_ARGUMENT = "invalid_argument"
    OS_ERROR = "os_error"
    USAGE = "usage"


class MessageQueueError(Exception):
    """Base exception for all mq errors."""

    kind: ErrorKind = ErrorKind.OS_ERROR


class QueueAlreadyExistsError(MessageQueueError):
    """Raised when exclusive creation finds a queue with the same name."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Message queue already exists: {name}")


class QueueNotFoundError(MessageQueueError):
    """Raised when a queue name doesn't exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Message queue not found: {name}")


class QueuePermissionError(MessageQueueError):
    """Raised when the requested access is not permitted on a queue."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, name: str, operation: str) -> None:
        self.name = name
        self.operation = operation
        super().__init__(f"Permission denied ({operation}): {name}")


class WouldBlockError(MessageQueueError):
    """Raised when a non-blocking send finds the queue full or a receive finds it empty."""

    kind = ErrorKind.WOULD_BLOCK

    def __init__(self, name: str, operation: str) -> None:
        self.name = name
        self.operation = operation
        state = "full" if operation == "send" else "empty"
        super().__init__(f"{operation} would block, queue is {state}: {name}")


class OperationInterruptedError(MessageQueueError):
    """Raised when a signal interrupts a blocking wait.

    Note: Named OperationInterruptedError to avoid shadowing Python's built-in
    InterruptedError.
    """

    kind = ErrorKind.INTERRUPTED

    def __init__(self, name: str, operation: str) -> None:
        self.name = name
        self.operation = operation
        super().__init__(f"{operation} interrupted by signal: {name}")


class ProtocolViolationError(MessageQueueError):
    """Raised when the kernel breaks a contract the tool relies on.

    Examples:
        - A received payload larger than the queue's max_message_size
        - A readiness wake without the readable flag
        - Error or hang-up flags on the queue descriptor
    """

    kind = ErrorKind.PROTOCOL_VIOLATION


class OutputWriteError(MessageQueueError):
    """Raised when writing a message to the output stream fails."""

    kind = ErrorKind.WRITE_FAILURE

    def __init__(self, what: str, reason: str) -> None:
        self.what = what
        self.reason = reason
        super().__init__(f"Error writing {what}: {reason}")


class InvalidQueueArgumentError(MessageQueueError):
    """Raised when the kernel rejects a size, priority or message length."""

    kind = ErrorKind.INVALID_ARGUMENT


class QueueOSError(MessageQueueError):
    """Raised for OS-level failures with no more specific kind."""

    kind = ErrorKind.OS_ERROR


class UsageError(MessageQueueError):
    """Raised when a command the dispatcher does not know reaches it."""

    kind = ErrorKind.USAGE
