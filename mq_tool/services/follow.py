"""Continuous receive-and-emit loop (``mq recv --follow``).

The loop cycles through three states::

    WAITING_READY -> RECEIVING -> EMITTING -> WAITING_READY -> ...

and leaves only through FATAL. Each readiness wake is followed by exactly
one receive, so messages that pile up between wakes are drained one per
cycle in queue order. Nothing is retried: a spurious wake, a failed receive
or a failed write ends the loop by raising.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NoReturn

from mq_tool.core.errors import MessageQueueError, ProtocolViolationError
from mq_tool.core.framer import Framer
from mq_tool.core.readiness import Readiness, ReadinessWaiter
from mq_tool.services.exchange import ReceiveSession

logger = logging.getLogger(__name__)


class FollowState(str, Enum):
    """States of the follow loop."""

    WAITING_READY = "waiting_ready"
    RECEIVING = "receiving"
    EMITTING = "emitting"
    FATAL = "fatal"


class FollowLoop:
    """Receive messages as they arrive and write them out, indefinitely.

    The session's handle and capacity are reused for every iteration; the
    loop never opens, resizes or closes anything itself.
    """

    def __init__(
        self,
        session: ReceiveSession,
        framer: Framer,
        waiter: ReadinessWaiter | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            session: Open receive session.
            framer: Output framer for received payloads.
            waiter: Readiness waiter on the session's descriptor. Built from
                the handle when omitted.
        """
        self._session = session
        self._framer = framer
        self._waiter = waiter or ReadinessWaiter(
            session.handle.fileno(), name=session.handle.name
        )
        self.state = FollowState.WAITING_READY
        self.messages_emitted = 0

    def step(self) -> None:
        """Run one full wait / receive / emit cycle.

        Raises:
            ProtocolViolationError: The wake was spurious or carried error flags.
            MessageQueueError: The receive or the write failed.
        """
        self.state = FollowState.WAITING_READY
        result = self._waiter.wait()
        if result.readiness is Readiness.ERROR:
            raise ProtocolViolationError(
                f"poll reported error flags on {self._session.handle.name} "
                f"(revents={result.revents:#x})"
            )
        if result.readiness is not Readiness.READY:
            raise ProtocolViolationError(
                f"poll revents != POLLIN on {self._session.handle.name} "
                f"(revents={result.revents:#x})"
            )

        self.state = FollowState.RECEIVING
        message = self._session.receive()

        self.state = FollowState.EMITTING
        self._framer.emit(message.payload)
        self.messages_emitted += 1

    def run(self) -> NoReturn:
        """Loop until a fatal error; always exits by raising."""
        logger.debug(f"Following {self._session.handle.name}")
        try:
            while True:
                self.step()
        except (MessageQueueError, KeyboardInterrupt):
            self.state = FollowState.FATAL
            logger.debug(
                f"Follow loop stopped after {self.messages_emitted} message(s)"
            )
            raise
        finally:
            self._waiter.close()
