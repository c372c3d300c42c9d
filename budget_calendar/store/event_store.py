"""
Local-First Event Store

DESIGN DECISION: The store is the single owner of event data.
- Events are bucketed by date; a bucket keeps creation order
- Every mutation writes the full index before returning
- Nothing is synced here - the store only tracks sync status so a
  sync service can push what changed and acknowledge it afterwards

FAILURE MODEL:
- Corrupt persisted data is NOT an error for callers. The store logs it
  and starts from an empty index.
- Storage read/write failures raise PersistenceError. The in-memory index
  keeps the change, so memory can run ahead of disk until the next
  successful write. The store does not retry.
- Updating or deleting an event that no longer exists is a silent no-op.
  A delete racing a stale screen must not crash the flow.

CONCURRENCY: None provided. Callers await each mutation before issuing
the next one.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Union

import structlog

from budget_calendar.config import StorageSettings, get_settings
from budget_calendar.models.event import (
    Event,
    EventDraft,
    EventIndex,
    EventPatch,
    SyncStatus,
    as_utc,
    copy_index,
)
from budget_calendar.services.storage.interface import (
    DecodeError,
    KeyValueStorageInterface,
    PersistenceError,
)
from budget_calendar.store.codec import (
    decode_index,
    decode_settings,
    decode_timestamp,
    encode_index,
    encode_settings,
    encode_timestamp,
)


logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[datetime], str]

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_RANDOM_LENGTH = 9


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_event_id(now: datetime) -> str:
    """
    Build an id from a time component and a random component.

    "1709251200000-k3j9x0a2b" - unique in practice without coordination.
    """
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_RANDOM_LENGTH))
    return f"{millis}-{suffix}"


def _position_of(bucket: list[Event], event_id: str) -> Optional[int]:
    for position, event in enumerate(bucket):
        if event.id == event_id:
            return position
    return None


class EventStore:
    """
    Date-bucketed CRUD over events, backed by key-value storage.

    Construct one per storage and inject it wherever it is needed.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        *,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
        settings: Optional[StorageSettings] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Durable key-value backend
            clock: Time source, defaults to the current UTC time
            id_factory: Builds an event id from the creation time
            settings: Storage key names, defaults to the configured ones
        """
        self._storage = storage
        self._clock = clock or utc_now
        self._id_factory = id_factory or generate_event_id
        self._settings = settings or get_settings().storage
        self._index: Optional[EventIndex] = None

    @property
    def clock(self) -> Clock:
        return self._clock

    # -------------------------------------------------------------------------
    # Loading and reads
    # -------------------------------------------------------------------------

    async def load_all(self) -> EventIndex:
        """
        (Re)load the persisted index.

        Absent or corrupt data yields an empty index. Only storage failures
        raise.
        """
        key = self._settings.events_key
        raw = await self._read(key)

        if raw is None:
            index: EventIndex = {}
        else:
            try:
                index = decode_index(raw)
            except DecodeError as e:
                logger.warning(
                    "events_decode_failed",
                    key=key,
                    size=len(raw),
                    error=str(e),
                )
                index = {}

        self._index = index
        logger.debug("events_loaded", dates=len(index))
        return copy_index(index)

    async def index(self) -> EventIndex:
        """A snapshot of the current index."""
        return copy_index(await self._loaded())

    async def events_on(self, date: str) -> list[Event]:
        """Events on one date in creation order."""
        index = await self._loaded()
        return list(index.get(date, []))

    async def list_unsynced(self) -> list[Event]:
        """
        Events whose current form has not been acknowledged remotely.

        Creation order holds within a date; order across dates is unspecified.
        """
        index = await self._loaded()
        return [
            event
            for bucket in index.values()
            for event in bucket
            if event.is_unsynced
        ]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add(self, draft: Union[EventDraft, dict[str, Any]]) -> Event:
        """
        Create an event and persist it.

        The draft is assumed to be validated by the caller.
        """
        if not isinstance(draft, EventDraft):
            draft = EventDraft.model_validate(draft)

        index = await self._loaded()
        now = as_utc(self._clock())
        event = Event(
            id=self._id_factory(now),
            created_at=now,
            updated_at=now,
            sync_status=SyncStatus.LOCAL,
            **draft.model_dump(),
        )

        index.setdefault(event.date, []).append(event)
        await self._persist_index("add")

        logger.info("event_added", event_id=event.id, date=event.date)
        return event

    async def update(
        self,
        date: str,
        event_id: str,
        patch: Union[EventPatch, dict[str, Any]],
    ) -> None:
        """
        Merge a patch into an event and mark it pending.

        An update always invalidates prior sync state. No-op if the
        date or the id is missing. A patch that changes the date moves the
        event to the end of the new date's bucket.
        """
        if not isinstance(patch, EventPatch):
            patch = EventPatch.model_validate(patch)

        index = await self._loaded()
        bucket = index.get(date)
        position = _position_of(bucket, event_id) if bucket else None
        if position is None:
            logger.debug("event_update_skipped", date=date, event_id=event_id)
            return

        current = bucket[position]
        updated = current.model_copy(update={
            **patch.changes(),
            "updated_at": max(as_utc(self._clock()), current.updated_at),
            "sync_status": SyncStatus.PENDING,
        })

        if updated.date == date:
            bucket[position] = updated
        else:
            del bucket[position]
            if not bucket:
                del index[date]
            index.setdefault(updated.date, []).append(updated)

        await self._persist_index("update")
        logger.info(
            "event_updated",
            event_id=event_id,
            date=updated.date,
            moved_from=date if updated.date != date else None,
        )

    async def delete(self, date: str, event_id: str) -> None:
        """
        Remove an event. The date key goes away with its last event.

        No-op if the date or the id is missing.
        """
        index = await self._loaded()
        bucket = index.get(date)
        position = _position_of(bucket, event_id) if bucket else None
        if position is None:
            logger.debug("event_delete_skipped", date=date, event_id=event_id)
            return

        del bucket[position]
        if not bucket:
            del index[date]

        await self._persist_index("delete")
        logger.info("event_deleted", event_id=event_id, date=date)

    async def mark_synced(self, ids: Iterable[str]) -> None:
        """
        Record a remote acknowledgment.

        updated_at is left untouched. The index is written once for the
        whole batch, and not at all if no event matched.
        """
        wanted = set(ids)
        if not wanted:
            return

        index = await self._loaded()
        marked = 0
        for bucket in index.values():
            for position, event in enumerate(bucket):
                if event.id in wanted:
                    bucket[position] = event.model_copy(
                        update={"sync_status": SyncStatus.SYNCED}
                    )
                    marked += 1

        if marked:
            await self._persist_index("mark_synced")
        logger.info("events_marked_synced", requested=len(wanted), marked=marked)

    # -------------------------------------------------------------------------
    # Settings and sync bookkeeping
    # -------------------------------------------------------------------------

    async def load_settings(self) -> dict[str, Any]:
        """The opaque settings blob, or {} if absent or unreadable."""
        key = self._settings.settings_key
        raw = await self._read(key)
        if raw is None:
            return {}
        try:
            return decode_settings(raw)
        except DecodeError as e:
            logger.warning("settings_decode_failed", key=key, error=str(e))
            return {}

    async def save_settings(self, settings: dict[str, Any]) -> None:
        await self._write(self._settings.settings_key, encode_settings(settings))

    async def record_last_sync(self, when: datetime) -> None:
        await self._write(self._settings.last_sync_key, encode_timestamp(when))

    async def last_synced_at(self) -> Optional[datetime]:
        key = self._settings.last_sync_key
        raw = await self._read(key)
        if raw is None:
            return None
        try:
            return decode_timestamp(raw)
        except DecodeError as e:
            logger.warning("last_sync_decode_failed", key=key, error=str(e))
            return None

    async def clear_all(self) -> None:
        """Remove every key the store owns and start from an empty index."""
        keys = self._settings.all_keys
        try:
            await self._storage.remove_many(keys)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to clear storage: {e}") from e
        self._index = {}
        logger.info("storage_cleared", keys=keys)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _loaded(self) -> EventIndex:
        if self._index is None:
            await self.load_all()
        return self._index

    async def _persist_index(self, operation: str) -> None:
        try:
            await self._write(self._settings.events_key, encode_index(self._index))
        except PersistenceError as e:
            logger.error("events_persist_failed", operation=operation, error=str(e))
            raise

    async def _read(self, key: str) -> Optional[bytes]:
        try:
            return await self._storage.get(key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read {key}: {e}", key=key) from e

    async def _write(self, key: str, value: bytes) -> None:
        try:
            await self._storage.set(key, value)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to write {key}: {e}", key=key) from e
