"""
Shared fixtures.

Tests never touch the real clock, random ids, the home directory or the
network: time and ids are injected, storage is in memory or under tmp_path.
"""

from datetime import datetime, timedelta, timezone

import pytest

from budget_calendar.config import StorageSettings
from budget_calendar.services.storage import (
    InMemoryKeyValueStorage,
    PersistenceError,
)
from budget_calendar.store import EventStore


START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class SequentialIds:
    """evt-1, evt-2, ..."""

    def __init__(self):
        self.issued = 0

    def __call__(self, now: datetime) -> str:
        self.issued += 1
        return f"evt-{self.issued}"


class CountingStorage(InMemoryKeyValueStorage):
    """Records every write."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes: list[str] = []

    async def set(self, key: str, value: bytes) -> None:
        self.writes.append(key)
        await super().set(key, value)


class FlakyStorage(CountingStorage):
    """Fails writes (and optionally reads) while the switches are on."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False
        self.fail_reads = False

    async def get(self, key: str):
        if self.fail_reads:
            raise PersistenceError("disk unavailable", key=key)
        return await super().get(key)

    async def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full", key=key)
        await super().set(key, value)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def storage_settings(tmp_path):
    return StorageSettings(data_dir=tmp_path / "data")


@pytest.fixture
def storage():
    return CountingStorage()


@pytest.fixture
def flaky_storage():
    return FlakyStorage()


@pytest.fixture
def store(storage, clock, ids, storage_settings):
    return EventStore(
        storage,
        clock=clock,
        id_factory=ids,
        settings=storage_settings,
    )
