"""Pytest fixtures for mq tool tests."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Generator
from pathlib import Path

import pytest

from mq_tool.config import Settings, override_settings, reset_settings

# ---------------------------------------------------------------------------
# Basic fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Provide test settings installed as the global singleton."""
    settings = Settings(
        default_max_messages=4,
        default_max_message_size=128,
        create_mode=0o600,
        log_level="DEBUG",
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def queue_name() -> str:
    """Provide a queue name unique to this test."""
    return f"/mq-tool-test-{uuid.uuid4().hex[:12]}"


class OutputCapture:
    """A real file descriptor that received payloads can be written to."""

    def __init__(self, path: Path) -> None:
        self._file = path.open("w+b")

    @property
    def fd(self) -> int:
        return self._file.fileno()

    def read(self) -> bytes:
        self._file.seek(0)
        return self._file.read()

    def close(self) -> None:
        self._file.close()


@pytest.fixture
def output(tmp_path: Path) -> Generator[OutputCapture, None, None]:
    """Provide an output descriptor backed by a temporary file."""
    capture = OutputCapture(tmp_path / "stdout.bin")
    yield capture
    capture.close()


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)

