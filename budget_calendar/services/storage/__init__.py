"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The file-backed store is the default; the in-memory one serves tests.
"""

from budget_calendar.services.storage.interface import (
    DecodeError,
    KeyValueStorageInterface,
    PersistenceError,
    StorageError,
)
from budget_calendar.services.storage.json_file import (
    FileKeyValueStorage,
    key_to_filename,
)
from budget_calendar.services.storage.memory import InMemoryKeyValueStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "DecodeError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "FileKeyValueStorage",
    "InMemoryKeyValueStorage",
    "key_to_filename",
]
