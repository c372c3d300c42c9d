"""Services package."""

from budget_calendar.services.storage import (
    DecodeError,
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
    PersistenceError,
    StorageError,
)
from budget_calendar.services.sync import (
    HttpSyncClient,
    RemoteSyncInterface,
    SyncService,
)

__all__ = [
    # Storage services
    "DecodeError",
    "FileKeyValueStorage",
    "InMemoryKeyValueStorage",
    "KeyValueStorageInterface",
    "PersistenceError",
    "StorageError",
    # Sync services
    "HttpSyncClient",
    "RemoteSyncInterface",
    "SyncService",
]
