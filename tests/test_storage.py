"""Tests for the key-value storage backends."""

import pytest

from budget_calendar.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    PersistenceError,
    key_to_filename,
)
from budget_calendar.store import EventStore


class TestKeyToFilename:
    @pytest.mark.parametrize("key,expected", [
        ("@calendar_events", "calendar_events.json"),
        ("@calendar_last_sync", "calendar_last_sync.json"),
        ("a/../b", "a_b.json"),
    ])
    def test_mapping(self, key, expected):
        assert key_to_filename(key) == expected

    def test_rejects_unusable_key(self):
        with pytest.raises(ValueError):
            key_to_filename("@@/")


class TestFileKeyValueStorage:
    """Tests for the file-backed store."""

    @pytest.mark.asyncio
    async def test_absent_key(self, tmp_path):
        storage = FileKeyValueStorage(tmp_path / "kv")
        assert await storage.get("@calendar_events") is None

    @pytest.mark.asyncio
    async def test_set_creates_directory(self, tmp_path):
        storage = FileKeyValueStorage(tmp_path / "nested" / "kv")
        await storage.set("@calendar_events", b"{}")
        assert storage.path_for("@calendar_events").read_bytes() == b"{}"

    @pytest.mark.asyncio
    async def test_overwrite_leaves_no_temp_files(self, tmp_path):
        storage = FileKeyValueStorage(tmp_path)
        await storage.set("@k", b"one")
        await storage.set("@k", b"two")
        assert await storage.get("@k") == b"two"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    @pytest.mark.asyncio
    async def test_remove_many_ignores_missing(self, tmp_path):
        storage = FileKeyValueStorage(tmp_path)
        await storage.set("@a", b"1")
        await storage.remove_many(["@a", "@missing"])
        assert await storage.get("@a") is None

    @pytest.mark.asyncio
    async def test_write_failure_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = FileKeyValueStorage(blocker / "kv")
        with pytest.raises(PersistenceError) as exc_info:
            await storage.set("@calendar_events", b"{}")
        assert exc_info.value.key == "@calendar_events"

    @pytest.mark.asyncio
    async def test_event_store_survives_restart(self, tmp_path, clock, ids, storage_settings):
        first = EventStore(
            FileKeyValueStorage(tmp_path),
            clock=clock,
            id_factory=ids,
            settings=storage_settings,
        )
        event = await first.add({"title": "Rent", "date": "2024-03-01", "amount": 1200})
        await first.save_settings({"currency": "EUR"})

        second = EventStore(FileKeyValueStorage(tmp_path), settings=storage_settings)
        assert await second.events_on("2024-03-01") == [event]
        assert await second.load_settings() == {"currency": "EUR"}

    @pytest.mark.asyncio
    async def test_unicode_titles(self, tmp_path, storage_settings):
        store = EventStore(FileKeyValueStorage(tmp_path), settings=storage_settings)
        await store.add({"title": "Café ☕", "date": "2024-03-01"})
        reopened = EventStore(FileKeyValueStorage(tmp_path), settings=storage_settings)
        [event] = await reopened.events_on("2024-03-01")
        assert event.title == "Café ☕"


class TestInMemoryKeyValueStorage:
    @pytest.mark.asyncio
    async def test_basic_operations(self):
        storage = InMemoryKeyValueStorage({"@a": b"1"})
        assert await storage.get("@a") == b"1"
        await storage.set("@b", b"2")
        await storage.remove_many(["@a", "@c"])
        assert storage.keys() == ["@b"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
