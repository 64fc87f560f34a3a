"""
Result types for fetches and sync cycles.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ballotsync.models import Candidate, Student


class DataTier(str, Enum):
    """Fallback tier a dataset was served from, tried in this order."""
    LIVE = "live"
    CACHED = "cached"
    DEFAULT = "default"


class ResultStatus(str, Enum):
    """Status of a sync cycle."""
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass
class FetchResult:
    """
    Result of one data access call.

    Attributes:
        action: Remote action requested (getStudents, getCandidates, getBoth)
        students: Student list, None when not requested
        candidates: Candidate list, None when not requested
        student_tier: Tier the students came from
        candidate_tier: Tier the candidates came from
        error: Failure message when the live fetch failed
        offline_skip: True when the network was skipped because we are offline
    """
    action: str
    students: Optional[list[Student]] = None
    candidates: Optional[list[Candidate]] = None
    student_tier: Optional[DataTier] = None
    candidate_tier: Optional[DataTier] = None
    error: Optional[str] = None
    offline_skip: bool = False
    fetched_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def tiers(self) -> list[DataTier]:
        return [t for t in (self.student_tier, self.candidate_tier) if t is not None]

    @property
    def live(self) -> bool:
        """True when every requested dataset came from the live endpoint."""
        return bool(self.tiers) and all(t == DataTier.LIVE for t in self.tiers)

    @property
    def from_cache(self) -> bool:
        return DataTier.CACHED in self.tiers

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        result = {
            "action": self.action,
            "live": self.live,
            "offline_skip": self.offline_skip,
            "fetched_at": self.fetched_at.isoformat(),
            "error": self.error,
        }
        if self.students is not None:
            result["students"] = [s.to_payload() for s in self.students]
            result["student_source"] = self.student_tier.value if self.student_tier else None
        if self.candidates is not None:
            result["candidates"] = [c.to_payload() for c in self.candidates]
            result["candidate_source"] = self.candidate_tier.value if self.candidate_tier else None
        return result


@dataclass
class SyncResult:
    """
    Result of a reconciliation cycle.

    Attributes:
        status: Overall status
        request_id: Request that triggered the cycle
        triggered_by: Source of the trigger (manual, reconnect, retry, http, cli)
        students_count: Students applied to the shared state
        candidates_count: Candidates applied to the shared state
        added_candidates: Candidate ids that entered the tally at zero
        dropped_candidates: Candidate ids removed from the tally
        errors: Failure messages
    """
    status: ResultStatus
    request_id: str = ""
    triggered_by: str = ""
    started_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    students_count: int = 0
    candidates_count: int = 0
    added_candidates: list[int] = field(default_factory=list)
    dropped_candidates: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def complete(self, status: Optional[ResultStatus] = None) -> "SyncResult":
        """Mark the cycle as complete; failure if any errors were recorded."""
        self.completed_at = datetime.utcnow()
        if status is not None:
            self.status = status
        elif self.errors:
            self.status = ResultStatus.FAILURE
        return self

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "status": self.status.value,
            "success": self.success,
            "request_id": self.request_id,
            "triggered_by": self.triggered_by,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "students_count": self.students_count,
            "candidates_count": self.candidates_count,
            "added_candidates": self.added_candidates,
            "dropped_candidates": self.dropped_candidates,
            "errors": self.errors[:10],
        }

    @classmethod
    def create(cls, request_id: str = "", triggered_by: str = "") -> "SyncResult":
        return cls(
            status=ResultStatus.SUCCESS,  # Will be updated on complete()
            request_id=request_id,
            triggered_by=triggered_by,
        )
