"""Shared pytest fixtures and configuration for chainlog tests."""

from datetime import datetime, timezone
from typing import List, Optional, Tuple

import pytest

from chainlog.config.settings import LoggerSettings, reset_settings
from chainlog.core.emission import Channel
from chainlog.infrastructure.diagnostics import reset_diagnostics
from chainlog.logger import Logger

FIXED_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingSink:
    """Sink that keeps every write in memory."""

    def __init__(self):
        self.records: List[Tuple[Channel, str]] = []

    def write(self, channel: Channel, text: str) -> None:
        self.records.append((channel, text))

    def texts(self, channel: Optional[Channel] = None) -> List[str]:
        return [text for ch, text in self.records if channel is None or ch is channel]

    @property
    def last(self) -> str:
        return self.records[-1][1]


@pytest.fixture(autouse=True)
def reset_singletons():
    """Start every test with fresh settings and diagnostics configuration."""
    reset_settings()
    reset_diagnostics()
    yield
    reset_settings()
    reset_diagnostics()


@pytest.fixture
def sink():
    """In-memory output sink."""
    return RecordingSink()


@pytest.fixture
def settings():
    """Settings independent of the environment and any .env file."""
    return LoggerSettings(
        _env_file=None,
        level="TRACE",
        colors=False,
        timestamp=None,
        depth=4,
        max_array_length=100,
    )


@pytest.fixture
def fixed_clock():
    """Clock that always returns 2024-01-01T12:00:00Z."""
    return lambda: FIXED_TIME


@pytest.fixture
def make_logger(sink, settings):
    """Factory for loggers writing to the recording sink."""

    def factory(**options) -> Logger:
        options.setdefault("sink", sink)
        options.setdefault("settings", settings)
        return Logger(**options)

    return factory
