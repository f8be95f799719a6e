"""
Shared fixtures for skinfetch tests.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

import pytest

from skinfetch.services.textures.errors import LoaderError

CONFIG_ENV_VARS = (
    "CACHE_MAX_SIZE",
    "CACHE_TTL_SECONDS",
    "SESSION_SERVER_URL",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FILE",
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingLoader:
    """Async loader stub that records every key it is asked for.

    Keys listed in ``failing`` raise ``LoaderError``. When ``gate`` is set,
    each load waits for it before resolving.
    """

    def __init__(
        self,
        values: Optional[Dict[Any, Any]] = None,
        failing: Iterable[Any] = (),
    ):
        self.values = values or {}
        self.failing = set(failing)
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[Any] = []

    async def __call__(self, key):
        self.calls.append(key)
        if self.gate is not None:
            await self.gate.wait()
        if key in self.failing:
            raise LoaderError(key, "remote lookup failed", status=500)
        return self.values.get(key, f"value-{key}")

    def count(self, key) -> int:
        return self.calls.count(key)


class RecordCollector(logging.Handler):
    """Collects records emitted on the non-propagating package logger."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record):
        self.records.append(record)

    def at(self, level: int) -> List[logging.LogRecord]:
        return [r for r in self.records if r.levelno == level]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep host environment and any local .env file out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_loader():
    """Factory for RecordingLoader instances with custom values or failures."""
    return RecordingLoader


@pytest.fixture
def loader(make_loader):
    return make_loader()


@pytest.fixture
def settle():
    """Let scheduled tasks run up to their next suspension point."""

    async def _settle(rounds: int = 5) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)

    return _settle


@pytest.fixture
def log_records():
    """Capture everything logged under the ``skinfetch`` logger."""
    package_logger = logging.getLogger("skinfetch")
    previous_level = package_logger.level
    collector = RecordCollector()
    package_logger.addHandler(collector)
    package_logger.setLevel(logging.DEBUG)
    try:
        yield collector
    finally:
        package_logger.removeHandler(collector)
        package_logger.setLevel(previous_level)
