"""Shared fixtures for unit tests.

``FakeKernel`` stands in for the kernel's message queue namespace. Its
``open`` method mimics the ``posix_ipc.MessageQueue`` constructor and raises
the real ``posix_ipc`` exceptions, so the production error translation runs
unchanged.
"""

from __future__ import annotations

import errno
import itertools
import select
from dataclasses import dataclass, field

import posix_ipc
import pytest

FAKE_MSGSIZE_MAX = 8192
FAKE_MSG_MAX = 10


@dataclass
class FakeQueueState:
    """Kernel-side state of one fake queue."""

    max_messages: int
    max_message_size: int
    messages: list[tuple[int, int, bytes]] = field(default_factory=list)
    deny_read: bool = False
    deny_write: bool = False
    _seq: itertools.count = field(default_factory=itertools.count)

    def push(self, payload: bytes, priority: int = 0) -> None:
        self.messages.append((-priority, next(self._seq), payload))

    def pop(self) -> tuple[bytes, int]:
        self.messages.sort()
        neg_priority, _, payload = self.messages.pop(0)
        return payload, -neg_priority

    def payloads(self) -> list[bytes]:
        return [payload for _, _, payload in sorted(self.messages)]


class FakeMessageQueue:
    """Mimics the parts of ``posix_ipc.MessageQueue`` the tool uses.

    A blocking call that would wait forever raises ``posix_ipc.SignalError``,
    as if the operator interrupted it.
    """

    def __init__(self, kernel: FakeKernel, state: FakeQueueState, read: bool, write: bool) -> None:
        self._kernel = kernel
        self._state = state
        self._read = read
        self._write = write
        self.mqd = next(kernel._fds)
        self.block = True
        self.closed = False

    @property
    def max_messages(self) -> int:
        return self._state.max_messages

    @property
    def max_message_size(self) -> int:
        return self._state.max_message_size

    @property
    def current_messages(self) -> int:
        return len(self._state.messages)

    def send(self, message: bytes, timeout: float | None = None, priority: int = 0) -> None:
        if not self._write:
            raise posix_ipc.PermissionsError("Bad file descriptor")
        if len(message) > self._state.max_message_size:
            raise ValueError("The message is longer than the queue's max_message_size")
        if len(self._state.messages) >= self._state.max_messages:
            if self.block:
                raise posix_ipc.SignalError("The wait was interrupted by a signal")
            raise posix_ipc.BusyError("The queue is full")
        self._state.push(bytes(message), priority)

    def receive(self, timeout: float | None = None) -> tuple[bytes, int]:
        if not self._read:
            raise posix_ipc.PermissionsError("Bad file descriptor")
        if not self._state.messages:
            if self.block:
                raise posix_ipc.SignalError("The wait was interrupted by a signal")
            raise posix_ipc.BusyError("The queue is empty")
        return self._state.pop()

    def close(self) -> None:
        if self.closed:
            raise posix_ipc.ExistentialError("The queue descriptor is already closed")
        self.closed = True
        self._kernel.close_calls += 1


class FakeKernel:
    """In-memory queue namespace patched over ``posix_ipc``."""

    def __init__(self) -> None:
        self.queues: dict[str, FakeQueueState] = {}
        self.handles: list[FakeMessageQueue] = []
        self.close_calls = 0
        self._fds = itertools.count(100)

    def open(
        self,
        name: str,
        flags: int = 0,
        mode: int = 0o600,
        max_messages: int = FAKE_MSG_MAX,
        max_message_size: int = FAKE_MSGSIZE_MAX,
        read: bool = True,
        write: bool = True,
    ) -> FakeMessageQueue:
        state = self.queues.get(name)
        if flags & posix_ipc.O_CREAT:
            if state is not None and flags & posix_ipc.O_EXCL:
                raise posix_ipc.ExistentialError(f"Queue {name} already exists")
            if state is None:
                if not (0 < max_messages <= FAKE_MSG_MAX) or not (
                    0 < max_message_size <= FAKE_MSGSIZE_MAX
                ):
                    raise ValueError("Invalid parameter(s)")
                state = FakeQueueState(max_messages, max_message_size)
                self.queues[name] = state
        elif state is None:
            raise posix_ipc.ExistentialError(f"No queue exists with the specified name {name}")

        if (read and state.deny_read) or (write and state.deny_write):
            raise posix_ipc.PermissionsError("Permission denied")

        handle = FakeMessageQueue(self, state, read, write)
        self.handles.append(handle)
        return handle

    def unlink(self, name: str) -> None:
        if name not in self.queues:
            raise posix_ipc.ExistentialError(f"No queue exists with the specified name {name}")
        del self.queues[name]

    def create(self, name: str, max_messages: int = 4, max_message_size: int = 64) -> FakeQueueState:
        """Create a queue directly, bypassing the tool."""
        state = FakeQueueState(max_messages, max_message_size)
        self.queues[name] = state
        return state

    @property
    def open_handles(self) -> int:
        return sum(1 for handle in self.handles if not handle.closed)


@pytest.fixture
def fake_kernel(monkeypatch: pytest.MonkeyPatch) -> FakeKernel:
    """Replace the kernel queue namespace with an in-memory fake."""
    kernel = FakeKernel()
    monkeypatch.setattr(posix_ipc, "MessageQueue", kernel.open)
    monkeypatch.setattr(posix_ipc, "unlink_message_queue", kernel.unlink)
    return kernel


class ScriptedPoller:
    """Stand-in for ``select.poll()`` returning pre-scripted event lists.

    Each script entry is either a list of ``(fd, revents)`` pairs or an
    exception instance to raise. An exhausted script raises InterruptedError,
    the way a signal ends an indefinite wait.
    """

    def __init__(self, script: list[object]) -> None:
        self.script = list(script)
        self.registered: dict[int, int] = {}
        self.poll_calls = 0

    def register(self, fd: int, eventmask: int = select.POLLIN) -> None:
        self.registered[fd] = eventmask

    def unregister(self, fd: int) -> None:
        del self.registered[fd]

    def poll(self, timeout: float | None = None) -> list[tuple[int, int]]:
        self.poll_calls += 1
        if not self.script:
            raise InterruptedError("poll interrupted")
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step  # type: ignore[return-value]


class QueuePoller(ScriptedPoller):
    """Poller reporting readable whenever the fake queue holds messages."""

    def __init__(self, state: FakeQueueState) -> None:
        super().__init__([])
        self._state = state

    def poll(self, timeout: float | None = None) -> list[tuple[int, int]]:
        self.poll_calls += 1
        if not self._state.messages:
            raise InterruptedError("poll interrupted")
        return [(fd, select.POLLIN) for fd in self.registered]


class RecordingWriter:
    """Fake ``os.write`` that accepts at most ``chunk`` bytes per call."""

    def __init__(self, chunk: int = 1 << 20, fail_on_call: int | None = None) -> None:
        self.chunk = chunk
        self.fail_on_call = fail_on_call
        self.data = bytearray()
        self.calls: list[int] = []

    def __call__(self, fd: int, data: bytes) -> int:
        self.calls.append(len(data))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise BrokenPipeError(errno.EPIPE, "Broken pipe")
        accepted = bytes(data[: self.chunk])
        self.data.extend(accepted)
        return len(accepted)
