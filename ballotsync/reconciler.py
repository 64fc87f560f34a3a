"""
State Reconciler

Merges freshly fetched students and candidates into the shared app state,
carrying vote counts over by candidate id.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from ballotsync.connectivity import ConnectivityMonitor
from ballotsync.context import RequestContext
from ballotsync.logging.sync_logger import get_logger
from ballotsync.models import AppState, rebuild_tally
from ballotsync.notifier import OfflineNotifier
from ballotsync.result import ResultStatus, SyncResult
from ballotsync.service import DataAccessService

logger = logging.getLogger(__name__)

RefreshHook = Callable[[], Any]


class StateReconciler:
    """
    Runs sync cycles against an externally owned AppState.

    Usage:
        reconciler = StateReconciler(service, state, monitor, notifier)
        reconciler.subscribe(dashboard.refresh)
        result = await reconciler.sync()
        if not result.success:
            ...
    """

    def __init__(
        self,
        service: DataAccessService,
        state: AppState,
        connectivity: ConnectivityMonitor,
        notifier: Optional[OfflineNotifier] = None,
        alerter=None,
    ):
        self.service = service
        self.state = state
        self.connectivity = connectivity
        self.notifier = notifier
        self.alerter = alerter
        self._refresh_hooks: list[RefreshHook] = []
        self.last_result: Optional[SyncResult] = None

    def subscribe(self, hook: RefreshHook) -> Callable[[], None]:
        """Register a UI refresh hook run after each successful sync. Returns an unsubscribe callable."""
        self._refresh_hooks.append(hook)

        def unsubscribe() -> None:
            if hook in self._refresh_hooks:
                self._refresh_hooks.remove(hook)

        return unsubscribe

    async def sync(self, ctx: Optional[RequestContext] = None) -> SyncResult:
        """
        Fetch both datasets concurrently and apply them to the state.

        Returns:
            SyncResult; success only when both datasets came from the live
            endpoint. On failure the state and the banner are left as they are.
        """
        ctx = ctx or RequestContext.for_manual()
        log = get_logger(ctx)
        result = SyncResult.create(request_id=ctx.request_id, triggered_by=ctx.triggered_by)

        if not self.connectivity.is_online:
            log.info("Offline, sync skipped")
            result.errors.append("Offline")
            self.last_result = result.complete(ResultStatus.SKIPPED)
            return self.last_result

        log.sync_started()

        try:
            students_result, candidates_result = await asyncio.gather(
                self.service.load_students(),
                self.service.load_candidates(),
            )
        except Exception as e:
            logger.exception("Sync fetch raised")
            result.errors.append(str(e))
            return self._failed(ctx, log, result)

        for fetched in (students_result, candidates_result):
            if not fetched.live:
                result.errors.append(f"{fetched.action}: {fetched.error or 'live data unavailable'}")
        if result.errors:
            return self._failed(ctx, log, result)

        self._apply(students_result.students, candidates_result.candidates, result)

        if self.notifier is not None:
            self.notifier.hide()
        await self._run_refresh_hooks()

        self.last_result = result.complete(ResultStatus.SUCCESS)
        log.sync_completed({
            "students": result.students_count,
            "candidates": result.candidates_count,
        })
        return self.last_result

    async def sync_on_reconnect(self) -> SyncResult:
        """Online listener registered with the connectivity monitor."""
        return await self.sync(RequestContext.for_reconnect())

    async def sync_on_retry(self) -> SyncResult:
        """Retry action bound to the offline banner."""
        return await self.sync(RequestContext.for_retry())

    def _apply(self, students, candidates, result: SyncResult) -> None:
        # No await between these assignments
        previous = self.state.votes
        self.state.students = list(students)
        self.state.candidates = list(candidates)
        self.state.votes = rebuild_tally(previous, candidates)

        result.students_count = len(self.state.students)
        result.candidates_count = len(self.state.candidates)
        result.added_candidates = [cid for cid in self.state.votes if cid not in previous]
        result.dropped_candidates = [cid for cid in previous if cid not in self.state.votes]

    async def _run_refresh_hooks(self) -> None:
        for hook in list(self._refresh_hooks):
            try:
                outcome = hook()
                if asyncio.iscoroutine(outcome):
                    await outcome
            except Exception as e:
                logger.error(f"Refresh hook failed: {e}")

    def _failed(self, ctx: RequestContext, log, result: SyncResult) -> SyncResult:
        self.last_result = result.complete(ResultStatus.FAILURE)
        log.sync_failed(result.errors[0], data={"errors": len(result.errors)})
        if self.alerter is not None:
            self.alerter.alert_sync_failed(ctx, result)
        return self.last_result
