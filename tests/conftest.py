"""Shared test fixtures.

Required settings are seeded into the environment before anything imports
src.main, which builds Settings at import time.
"""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdef0123456789")
os.environ.setdefault("ODDO_BASE_URI", "https://upstream.test/api")

from config.settings import Settings  # noqa: E402


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET="unit-test-secret-0123456789abcdef0123",
        ODDO_BASE_URI="https://upstream.test/api",
        STORAGE_PATH=str(tmp_path / "storage"),
    )
