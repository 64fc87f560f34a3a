"""
Local cache of the last successfully fetched datasets.
"""

import json
import logging
from datetime import datetime
from typing import Optional

from ballotsync.errors import ValidationFailure
from ballotsync.models import Candidate, Student, parse_candidates, parse_students
from ballotsync.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

STUDENTS_KEY = "cachedStudents"
CANDIDATES_KEY = "cachedCandidates"
LAST_SYNC_KEY = "lastSync"


class LocalCache:
    """
    Typed view over a KeyValueStore holding the cache snapshot.

    Datasets are stored as JSON arrays of wire records under
    ``cachedStudents`` / ``cachedCandidates``; ``lastSync`` holds an
    ISO-8601 timestamp. Every save writes the dataset(s) and the
    timestamp in one ``set_many`` call.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read(self, key: str, parser) -> list:
        raw = self.store.get(key)
        if not raw:
            return []
        try:
            return parser(json.loads(raw))
        except (ValueError, ValidationFailure) as e:
            logger.warning(f"Ignoring unreadable cache entry {key}: {e}")
            return []

    def get_students(self) -> list[Student]:
        return self._read(STUDENTS_KEY, parse_students)

    def get_candidates(self) -> list[Candidate]:
        return self._read(CANDIDATES_KEY, parse_candidates)

    @property
    def last_sync(self) -> Optional[datetime]:
        raw = self.store.get(LAST_SYNC_KEY)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None

    def save(
        self,
        students: Optional[list[Student]] = None,
        candidates: Optional[list[Candidate]] = None,
        synced_at: Optional[datetime] = None,
    ) -> None:
        """
        Overwrite the given dataset(s) and stamp lastSync, as one write.

        Datasets passed as None are left as they are.
        """
        values = {}
        if students is not None:
            values[STUDENTS_KEY] = json.dumps([s.to_payload() for s in students], ensure_ascii=False)
        if candidates is not None:
            values[CANDIDATES_KEY] = json.dumps([c.to_payload() for c in candidates], ensure_ascii=False)
        if not values:
            return

        values[LAST_SYNC_KEY] = (synced_at or datetime.utcnow()).isoformat()
        self.store.set_many(values)
        logger.info(
            f"Cache updated - students: {len(students) if students is not None else '-'}, "
            f"candidates: {len(candidates) if candidates is not None else '-'}"
        )

    def clear(self) -> None:
        for key in (STUDENTS_KEY, CANDIDATES_KEY, LAST_SYNC_KEY):
            self.store.delete(key)

    def to_dict(self) -> dict:
        last_sync = self.last_sync
        return {
            "students": len(self.get_students()),
            "candidates": len(self.get_candidates()),
            "last_sync": last_sync.isoformat() if last_sync else None,
        }
