"""Readiness notification for a single queue descriptor.

A ``ReadinessWaiter`` is a wait set holding exactly one descriptor, watched
for "readable". ``wait()`` blocks with no timeout and reports one of three
outcomes instead of a raw event list.
"""

from __future__ import annotations

import logging
import select
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from mq_tool.core.errors import OperationInterruptedError, QueueOSError

logger = logging.getLogger(__name__)

_ERROR_FLAGS = select.POLLERR | select.POLLHUP | select.POLLNVAL


class Readiness(Enum):
    """Outcome of one readiness wait."""

    READY = "ready"
    NOT_READY = "not_ready"  # woke without the readable flag
    ERROR = "error"  # error, hang-up or invalid-descriptor flag set


@dataclass(frozen=True)
class WaitResult:
    """Readiness outcome plus the raw event flags that produced it."""

    readiness: Readiness
    revents: int = 0


class ReadinessWaiter:
    """Wait indefinitely for one descriptor to become readable."""

    def __init__(
        self,
        fd: int,
        name: str = "",
        poller_factory: Callable[[], Any] | None = None,
    ) -> None:
        """Register the descriptor for readable events.

        Args:
            fd: Descriptor to watch.
            name: Queue name, used in error messages.
            poller_factory: Builds the underlying poll object (``select.poll``).

        Raises:
            QueueOSError: The descriptor could not be registered.
        """
        self._fd = fd
        self._name = name
        self._poller = (poller_factory or select.poll)()
        try:
            self._poller.register(fd, select.POLLIN)
        except OSError as e:
            raise QueueOSError(f"poll register failed for {name}: {e.strerror or e}") from e
        except ValueError as e:
            raise QueueOSError(f"poll register failed for {name}: {e}") from e

    def wait(self) -> WaitResult:
        """Block until the descriptor signals an event.

        Raises:
            OperationInterruptedError: A signal interrupted the wait.
            QueueOSError: The poll call itself failed.
        """
        try:
            events = self._poller.poll()
        except InterruptedError as e:
            raise OperationInterruptedError(self._name, "poll") from e
        except OSError as e:
            raise QueueOSError(f"poll failed for {self._name}: {e.strerror or e}") from e

        revents = 0
        for fd, flags in events:
            if fd == self._fd:
                revents |= flags

        if revents & _ERROR_FLAGS:
            return WaitResult(Readiness.ERROR, revents)
        if revents & select.POLLIN:
            return WaitResult(Readiness.READY, revents)
        return WaitResult(Readiness.NOT_READY, revents)

    def close(self) -> None:
        """Drop the descriptor from the wait set."""
        try:
            self._poller.unregister(self._fd)
        except KeyError:
            logger.debug(f"Descriptor {self._fd} was not registered")
