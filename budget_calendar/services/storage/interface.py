"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The event store talks to durable storage only through
this interface. This allows us to:
1. Use a plain file directory on desktop/server installs
2. Use in-memory storage for testing
3. Swap in a device key-value store or a database later
4. Keep event logic decoupled from the storage medium

The interface is intentionally tiny - three operations over opaque bytes.
Serialization is the caller's concern.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key-value storage.

    Any storage implementation must implement these methods.
    Implementations raise PersistenceError for any read/write failure.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored bytes, or None if the key is absent

        Raises:
            PersistenceError: If the read fails
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized value

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def remove_many(self, keys: Iterable[str]) -> None:
        """
        Remove several keys. Missing keys are ignored.

        Args:
            keys: Storage keys to remove

        Raises:
            PersistenceError: If a removal fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """The underlying storage could not be read or written."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class DecodeError(StorageError):
    """Persisted data exists but could not be decoded."""
    pass
