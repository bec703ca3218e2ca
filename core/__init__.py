"""
Core persistence layer for the trade journal.

Every collection the journal owns is stored as a JSON string in a key-value
backend. Swap backends without touching the journal.
"""

from .kv_store import (
    KeyValueStore,
    MemoryKeyValueStore,
    DiskKeyValueStore,
    StorageError,
    create_kv_store,
)

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "DiskKeyValueStore",
    "StorageError",
    "create_kv_store",
]
