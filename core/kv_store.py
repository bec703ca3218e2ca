"""
Key-value persistence backends.

The journal keeps each collection as one JSON string under a fixed key.
Backends only need two operations:
1. get(key) - the stored string, or None if absent
2. set(key, value) - replace the stored string in full
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
import logging

from diskcache import Cache

from config import paths, storage_config, StorageConfig

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a backend fails to read or write a key."""
    pass


class KeyValueStore(ABC):
    """Abstract string-to-string store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            StorageError: if the backend rejects the write
        """
        pass


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Value for {key!r} must be a string, got {type(value).__name__}")
        self._data[key] = value

    def snapshot(self) -> Dict[str, str]:
        """Copy of everything stored."""
        return dict(self._data)


class DiskKeyValueStore(KeyValueStore):
    """
    Persistent store on top of diskcache.

    Why diskcache?
    - No external services
    - Atomic writes backed by SQLite
    - Survives restarts, perfect for a single-user journal
    """

    def __init__(self, directory: Optional[Path] = None):
        self.directory = directory or paths.storage_dir
        self.directory.mkdir(parents=True, exist_ok=True)
        self.cache = Cache(directory=str(self.directory))
        logger.info(f"Disk store opened at: {self.directory}")

    def get(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.error(f"Store read error for {key}: {e}")
            raise StorageError(f"Failed to read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value)
            logger.debug(f"Stored {key} ({len(value)} chars)")
        except Exception as e:
            logger.error(f"Store write error for {key}: {e}")
            raise StorageError(f"Failed to write {key}: {e}") from e

    def close(self) -> None:
        self.cache.close()


def create_kv_store(config: Optional[StorageConfig] = None) -> KeyValueStore:
    """Build the backend named in the storage config."""
    config = config or storage_config

    if config.backend == "memory":
        logger.info("Using in-memory store (nothing will be persisted)")
        return MemoryKeyValueStore()
    if config.backend == "disk":
        return DiskKeyValueStore()

    raise ValueError(f"Unknown storage backend: {config.backend}")
