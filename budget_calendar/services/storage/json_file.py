"""
File-Backed Key-Value Storage

DESIGN DECISION: One file per key inside a data directory because:
1. The whole event index is read and written wholesale anyway
2. Users can inspect and back up their data with ordinary tools
3. No database setup required

TRADEOFFS:
- Every write rewrites the full value (fine for personal-scale data)
- No cross-key transactions (the event store never needs them)

Writes go to a temporary file first and are moved into place with
os.replace, so a crash mid-write never leaves a truncated value behind.
Blocking I/O runs in a worker thread to keep the event loop free.
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

import structlog

from budget_calendar.services.storage.interface import (
    KeyValueStorageInterface,
    PersistenceError,
)


logger = structlog.get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9]+")


def key_to_filename(key: str) -> str:
    """
    Map a storage key to a file name.

    "@calendar_events" -> "calendar_events.json"
    """
    stem = _UNSAFE_KEY_CHARS.sub("_", key).strip("_")
    if not stem:
        raise ValueError(f"Storage key has no usable characters: {key!r}")
    return f"{stem}.json"


class FileKeyValueStorage(KeyValueStorageInterface):
    """
    Stores each key as a file in a directory.

    The directory is created on first write.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / key_to_filename(key)

    async def get(self, key: str) -> Optional[bytes]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def remove_many(self, keys: Iterable[str]) -> None:
        await asyncio.to_thread(self._remove, list(keys))

    def _read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read {key}: {e}", key=key) from e

    def _write(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory,
                prefix=f".{path.stem}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {key}: {e}", key=key) from e

        logger.debug("storage_write", key=key, path=str(path), size=len(value))

    def _remove(self, keys: list[str]) -> None:
        for key in keys:
            try:
                self.path_for(key).unlink(missing_ok=True)
            except OSError as e:
                raise PersistenceError(f"Failed to remove {key}: {e}", key=key) from e
