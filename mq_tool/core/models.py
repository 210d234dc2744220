"""Data models for the mq tool."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

QUEUE_NAME_PREFIX = "/"


class Command(str, Enum):
    """Commands understood by the dispatcher."""

    CREATE = "create"
    INFO = "info"
    UNLINK = "unlink"
    SEND = "send"
    RECV = "recv"


class AccessMode(str, Enum):
    """Access requested when opening an existing queue."""

    READ_ONLY = "O_RDONLY"
    WRITE_ONLY = "O_WRONLY"


class Delimiter(Enum):
    """Byte appended after each message written to standard output."""

    NEWLINE = "n"  # line feed [default]
    NUL = "z"  # zero byte
    NONE = "x"  # no delimiter

    @property
    def byte(self) -> bytes:
        """The delimiter byte, or ``b""`` for NONE."""
        return _DELIMITER_BYTES[self]

    @classmethod
    def from_code(cls, code: str) -> Delimiter:
        """Parse a CLI delimiter letter (``n``, ``z`` or ``x``).

        Raises:
            ValueError: If the letter is not a known delimiter.
        """
        try:
            return cls(code)
        except ValueError:
            raise ValueError(
                f"Invalid delimiter specifier '{code}' (use 'n' or 'z' or 'x')"
            ) from None


_DELIMITER_BYTES: dict[Delimiter, bytes] = {
    Delimiter.NEWLINE: b"\n",
    Delimiter.NUL: b"\x00",
    Delimiter.NONE: b"",
}


@dataclass(frozen=True)
class QueueAttributes:
    """Snapshot of a queue's kernel attributes."""

    max_messages: int
    max_message_size: int  # fixed at creation, sizes every receive
    current_messages: int


@dataclass(frozen=True)
class Message:
    """A payload together with its queue priority."""

    payload: bytes
    priority: int = 0


def validate_queue_name(name: str) -> str:
    """Check that a queue name follows the leading-slash convention.

    Raises:
        ValueError: If the name is empty, lacks the leading ``/`` or
            contains a NUL byte.
    """
    if len(name) < 2 or not name.startswith(QUEUE_NAME_PREFIX):
        raise ValueError(f"Queue name must start with '/' followed by a name, got {name!r}")
    if "\x00" in name:
        raise ValueError("Queue name contains null bytes")
    return name


class CommandDescriptor(BaseModel):
    """A fully parsed command, ready for the dispatcher."""

    model_config = ConfigDict(frozen=True)

    command: Command
    queue_name: str
    verbose: bool = False
    timestamp: bool = False
    blocking: bool = True
    follow: bool = False
    priority: int = Field(default=0, ge=0)
    delimiter: Delimiter = Delimiter.NEWLINE
    max_messages: int = Field(default=10, ge=1, description="create only")
    max_message_size: int = Field(default=1024, ge=1, description="create only")
    payload: bytes | None = Field(default=None, description="send only")

    @field_validator("queue_name")
    @classmethod
    def _check_queue_name(cls, value: str) -> str:
        return validate_queue_name(value)

    @model_validator(mode="after")
    def _check_payload(self) -> CommandDescriptor:
        if self.command is Command.SEND and self.payload is None:
            raise ValueError("send requires a message payload")
        return self
