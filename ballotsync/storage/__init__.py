"""
Storage Layer

Durable key-value stores and the typed dataset cache built on them.
"""

from ballotsync.storage.kv import KeyValueStore, MemoryStore, JsonFileStore
from ballotsync.storage.cache import (
    LocalCache,
    STUDENTS_KEY,
    CANDIDATES_KEY,
    LAST_SYNC_KEY,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "LocalCache",
    "STUDENTS_KEY",
    "CANDIDATES_KEY",
    "LAST_SYNC_KEY",
]
