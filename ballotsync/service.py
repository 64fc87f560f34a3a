"""
Data Access Service

Fetch-or-fallback for the roster and the candidate list.

Fallback tiers, tried in order:
    live    - one GET to the Apps Script endpoint
    cached  - last successful fetch from the local cache
    default - hardcoded sample data

A dataset is never returned empty, and no fetch failure reaches the
caller: failures are logged and turned into a cache/default lookup.
"""

import asyncio
import logging
from typing import Any, Optional

from ballotsync.clients.apps_script import Action, AppsScriptClient
from ballotsync.connectivity import ConnectivityMonitor
from ballotsync.defaults import default_candidates, default_students
from ballotsync.errors import DataSourceError, ValidationFailure
from ballotsync.logging.sync_logger import SyncLogger, get_logger
from ballotsync.models import Candidate, Student, parse_candidates, parse_students
from ballotsync.notifier import OfflineNotifier
from ballotsync.result import DataTier, FetchResult
from ballotsync.storage.cache import LocalCache

logger = logging.getLogger(__name__)


class DataAccessService:
    """
    Orchestrates live fetch, cache and defaults for each dataset.

    Usage:
        service = DataAccessService(client, cache, monitor, notifier)
        students = await service.fetch_students()
        students, candidates = await service.fetch_both()

        # With the tier that served the data
        result = await service.load_candidates()
        result.candidate_tier  # DataTier.LIVE / CACHED / DEFAULT
    """

    def __init__(
        self,
        client: AppsScriptClient,
        cache: LocalCache,
        connectivity: ConnectivityMonitor,
        notifier: Optional[OfflineNotifier] = None,
        log: Optional[SyncLogger] = None,
    ):
        self.client = client
        self.cache = cache
        self.connectivity = connectivity
        self.notifier = notifier
        self.log = log or get_logger()

    # =========================================================================
    # Public API
    # =========================================================================

    async def fetch_students(self) -> list[Student]:
        """Get the student roster (never empty)."""
        return (await self.load_students()).students

    async def fetch_candidates(self) -> list[Candidate]:
        """Get the candidate list (never empty)."""
        return (await self.load_candidates()).candidates

    async def fetch_both(self) -> tuple[list[Student], list[Candidate]]:
        """Get roster and candidates with a single remote call."""
        result = await self.load_both()
        return result.students, result.candidates

    async def load_students(self) -> FetchResult:
        return await self._load(Action.GET_STUDENTS, students=True, candidates=False)

    async def load_candidates(self) -> FetchResult:
        return await self._load(Action.GET_CANDIDATES, students=False, candidates=True)

    async def load_both(self) -> FetchResult:
        return await self._load(Action.GET_BOTH, students=True, candidates=True)

    # =========================================================================
    # Fallback chain
    # =========================================================================

    async def _load(self, action: Action, students: bool, candidates: bool) -> FetchResult:
        result = FetchResult(action=action.value)

        if not self.connectivity.is_online:
            self.log.info(f"Offline mode - using cached data for {action.value}")
            result.offline_skip = True
            self._fill_from_fallback(result, students, candidates, notify=False)
            return result

        try:
            payload = await asyncio.to_thread(self.client.fetch, action)
            fetched_students, fetched_candidates = self._parse(action, payload)
        except DataSourceError as e:
            self.log.fetch_failed(action.value, e.message, kind=e.kind)
            result.error = e.message
            self._fill_from_fallback(result, students, candidates, notify=True)
            return result
        except Exception as e:
            logger.exception(f"Unexpected error fetching {action.value}")
            result.error = f"Unexpected error: {e}"
            self._fill_from_fallback(result, students, candidates, notify=True)
            return result

        self._persist(fetched_students, fetched_candidates)

        if students:
            result.students = fetched_students
            result.student_tier = DataTier.LIVE
        if candidates:
            result.candidates = fetched_candidates
            result.candidate_tier = DataTier.LIVE
        return result

    def _parse(
        self, action: Action, payload: Any
    ) -> tuple[Optional[list[Student]], Optional[list[Candidate]]]:
        """
        Validate the payload shape and build model objects.

        An empty dataset is rejected so it never replaces cached data or
        the current state.
        """
        if action == Action.GET_STUDENTS:
            students, candidates = parse_students(payload), None
        elif action == Action.GET_CANDIDATES:
            students, candidates = None, parse_candidates(payload)
        else:
            if (
                not isinstance(payload, dict)
                or "students" not in payload
                or "candidates" not in payload
            ):
                raise ValidationFailure(
                    "Invalid data structure received from Apps Script", action=action.value
                )
            students = parse_students(payload["students"])
            candidates = parse_candidates(payload["candidates"])

        if students is not None and not students:
            raise ValidationFailure("Empty student list received", action=action.value)
        if candidates is not None and not candidates:
            raise ValidationFailure("Empty candidate list received", action=action.value)
        return students, candidates

    def _persist(
        self,
        students: Optional[list[Student]],
        candidates: Optional[list[Candidate]],
    ) -> None:
        try:
            self.cache.save(students=students, candidates=candidates)
        except OSError as e:
            # Live data is still served; only the offline copy is stale
            self.log.error("Could not write cache", error=str(e))

    def _fill_from_fallback(
        self,
        result: FetchResult,
        students: bool,
        candidates: bool,
        notify: bool,
    ) -> None:
        """
        Fill the requested datasets from the cache, or defaults when empty.

        The offline banner is shown only for a failed attempt that was
        answered from the cache; defaults and deliberate offline skips
        stay silent.
        """
        if students:
            cached = self.cache.get_students()
            if cached:
                result.students, result.student_tier = cached, DataTier.CACHED
            else:
                result.students, result.student_tier = default_students(), DataTier.DEFAULT
            self.log.fallback("students", result.student_tier.value, len(result.students))

        if candidates:
            cached = self.cache.get_candidates()
            if cached:
                result.candidates, result.candidate_tier = cached, DataTier.CACHED
            else:
                result.candidates, result.candidate_tier = default_candidates(), DataTier.DEFAULT
            self.log.fallback("candidates", result.candidate_tier.value, len(result.candidates))

        if notify and result.from_cache and self.notifier is not None:
            self.notifier.show(result.error)
