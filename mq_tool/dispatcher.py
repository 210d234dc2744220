"""Maps a parsed command onto the queue components and an exit status."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from mq_tool.config import Settings, get_settings
from mq_tool.core.errors import MessageQueueError, UsageError
from mq_tool.core.framer import STDOUT_FILENO, Framer
from mq_tool.core.models import AccessMode, Command, CommandDescriptor
from mq_tool.core.queue_handle import QueueHandle, unlink_queue
from mq_tool.services.exchange import open_receive_session, send_message
from mq_tool.services.follow import FollowLoop

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class CommandDispatcher:
    """Runs one command and reports its process exit status."""

    def __init__(
        self,
        settings: Settings | None = None,
        out_fd: int = STDOUT_FILENO,
        info_stream: TextIO | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            settings: Tool settings. Defaults to the global settings.
            out_fd: Descriptor received payloads are written to.
            info_stream: Text stream for the ``info`` line. Defaults to stdout.
        """
        self._settings = settings or get_settings()
        self._out_fd = out_fd
        self._info_stream = info_stream
        self._handlers: dict[Command, Callable[[CommandDescriptor], None]] = {
            Command.CREATE: self._create,
            Command.INFO: self._info,
            Command.UNLINK: self._unlink,
            Command.SEND: self._send,
            Command.RECV: self._recv,
        }

    def dispatch(self, descriptor: CommandDescriptor) -> int:
        """Run the command described by ``descriptor``.

        Returns:
            Exit code (0 for success, 1 for error).
        """
        handler = self._handlers.get(descriptor.command)
        label = getattr(descriptor.command, "value", descriptor.command)
        try:
            if handler is None:
                raise UsageError(f"Unknown command: {descriptor.command}")
            handler(descriptor)
        except MessageQueueError as e:
            logger.error(f"{label} failed: {e}", exc_info=descriptor.verbose)
            return EXIT_FAILURE
        except KeyboardInterrupt:
            logger.error(f"{label} interrupted")
            return EXIT_FAILURE
        if descriptor.command is Command.RECV and descriptor.follow:
            return EXIT_FAILURE
        return EXIT_SUCCESS

    def _create(self, descriptor: CommandDescriptor) -> None:
        with QueueHandle.open_create(
            descriptor.queue_name,
            max_messages=descriptor.max_messages,
            max_message_size=descriptor.max_message_size,
            mode=self._settings.create_mode,
        ):
            pass

    def _info(self, descriptor: CommandDescriptor) -> None:
        with QueueHandle.open_existing(descriptor.queue_name, AccessMode.READ_ONLY) as handle:
            attrs = handle.query_attributes()
        stream = self._info_stream or sys.stdout
        print(
            f"{descriptor.queue_name}: maxmsg={attrs.max_messages}, "
            f"msgsize={attrs.max_message_size}, curmsgs={attrs.current_messages}",
            file=stream,
            flush=True,
        )

    def _unlink(self, descriptor: CommandDescriptor) -> None:
        unlink_queue(descriptor.queue_name)

    def _send(self, descriptor: CommandDescriptor) -> None:
        payload = descriptor.payload if descriptor.payload is not None else b""
        with QueueHandle.open_existing(
            descriptor.queue_name,
            AccessMode.WRITE_ONLY,
            blocking=descriptor.blocking,
        ) as handle:
            send_message(handle, payload, descriptor.priority)

    def _recv(self, descriptor: CommandDescriptor) -> None:
        framer = Framer(
            delimiter=descriptor.delimiter,
            fd=self._out_fd,
            timestamp=descriptor.timestamp,
        )
        with open_receive_session(descriptor.queue_name, blocking=descriptor.blocking) as session:
            if descriptor.follow:
                FollowLoop(session, framer).run()
            else:
                message = session.receive()
                framer.emit(message.payload)
