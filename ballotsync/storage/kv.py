"""
Durable key-value stores.

A flat string -> string namespace that survives restarts. ``set_many``
writes all keys as one unit.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """
    Abstract base for durable key-value stores.

    Implement this to add new backends (e.g., sqlite, redis, ...)
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    def set_many(self, values: dict[str, str]) -> None:
        """Write all values as a single unit."""
        pass

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        pass


class MemoryStore(KeyValueStore):
    """In-process store for tests and ephemeral runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_many(self, values: dict[str, str]) -> None:
        self._data.update(values)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Store persisted as one JSON object on disk.

    Writes go to a temporary file in the same directory which then
    replaces the target, so readers see either the old or the new mapping.

    Usage:
        store = JsonFileStore(".ballotsync/cache.json")
        store.set_many({"cachedStudents": "[...]", "lastSync": "2024-01-01T00:00:00"})
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._data: Optional[dict[str, str]] = None

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        if not self.path.exists():
            self._data = {}
            return self._data

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read cache file {self.path}: {e}")
            raw = {}

        if not isinstance(raw, dict):
            logger.warning(f"Cache file {self.path} is not a JSON object, ignoring it")
            raw = {}

        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_many(self, values: dict[str, str]) -> None:
        data = dict(self._load())
        data.update(values)
        self._flush(data)
        self._data = data

    def delete(self, key: str) -> None:
        data = dict(self._load())
        if data.pop(key, None) is not None:
            self._flush(data)
            self._data = data

    def keys(self) -> list[str]:
        return list(self._load())
