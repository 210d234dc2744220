"""Fixtures for tests that talk to real POSIX message queues.

Skipped where the platform has no message queue support or where the
sandbox refuses to create one.
"""

from __future__ import annotations

import contextlib
import io
import sys
from collections.abc import Generator

import posix_ipc
import pytest

from mq_tool.config import Settings
from mq_tool.core.errors import MessageQueueError, QueueNotFoundError
from mq_tool.core.queue_handle import QueueHandle, unlink_queue
from mq_tool.dispatcher import CommandDispatcher
from tests.conftest import OutputCapture

REAL_MAX_MESSAGES = 4
REAL_MAX_MESSAGE_SIZE = 128


requires_mqueue = pytest.mark.skipif(
    not (posix_ipc.MESSAGE_QUEUES_SUPPORTED and sys.platform.startswith("linux")),
    reason="POSIX message queues with poll() need Linux",
)


@pytest.fixture
def real_queue(queue_name: str) -> Generator[str, None, None]:
    """Create a real queue and unlink it after the test."""
    try:
        handle = QueueHandle.open_create(
            queue_name,
            max_messages=REAL_MAX_MESSAGES,
            max_message_size=REAL_MAX_MESSAGE_SIZE,
            mode=0o600,
        )
    except MessageQueueError as e:
        pytest.skip(f"cannot create message queues here: {e}")
    handle.close()
    yield queue_name
    with contextlib.suppress(QueueNotFoundError):
        unlink_queue(queue_name)


@pytest.fixture
def real_dispatcher(test_settings: Settings, output: OutputCapture) -> CommandDispatcher:
    return CommandDispatcher(test_settings, out_fd=output.fd, info_stream=io.StringIO())
