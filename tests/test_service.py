"""
Tests for the Data Access Service fallback chain
"""

import asyncio
from datetime import datetime

import pytest
from unittest.mock import Mock

from ballotsync.clients.apps_script import Action
from ballotsync.defaults import default_candidates, default_students
from ballotsync.errors import ApplicationFailure, HttpStatusFailure, NetworkFailure
from ballotsync.models import parse_candidates, parse_students
from ballotsync.result import DataTier
from ballotsync.service import DataAccessService
from ballotsync.storage.cache import LAST_SYNC_KEY


@pytest.fixture
def failing_client():
    client = Mock()
    client.fetch.side_effect = NetworkFailure("unreachable")
    return client


@pytest.fixture
def make_service(cache, notifier, mock_logger):
    def factory(client, connectivity):
        return DataAccessService(
            client=client,
            cache=cache,
            connectivity=connectivity,
            notifier=notifier,
            log=mock_logger,
        )
    return factory


class TestLiveFetch:
    """Tests for the live tier."""

    def test_fetch_students(self, service, mock_client, sample_students, cache):
        students = asyncio.run(service.fetch_students())

        assert students == parse_students(sample_students)
        mock_client.fetch.assert_called_once_with(Action.GET_STUDENTS)
        assert cache.get_students() == students
        assert cache.last_sync is not None

    def test_fetch_candidates(self, service, sample_candidates, cache):
        candidates = asyncio.run(service.fetch_candidates())

        assert candidates == parse_candidates(sample_candidates)
        assert cache.get_candidates() == candidates
        # Only the fetched dataset is written
        assert cache.get_students() == []

    def test_fetch_both_caches_exactly_fetched(
        self, service, sample_students, sample_candidates, cache, memory_store, notifier
    ):
        before = datetime.utcnow()

        students, candidates = asyncio.run(service.fetch_both())

        assert students == parse_students(sample_students)
        assert candidates == parse_candidates(sample_candidates)
        assert cache.get_students() == students
        assert cache.get_candidates() == candidates
        assert datetime.fromisoformat(memory_store.get(LAST_SYNC_KEY)) >= before
        assert not notifier.visible

    def test_load_reports_live_tier(self, service):
        result = asyncio.run(service.load_both())

        assert result.live
        assert result.student_tier == DataTier.LIVE
        assert result.candidate_tier == DataTier.LIVE
        assert result.error is None

    def test_cache_write_failure_still_returns_live(self, service, cache, sample_students):
        cache.store.set_many = Mock(side_effect=OSError("read-only"))

        result = asyncio.run(service.load_students())

        assert result.live
        assert result.students == parse_students(sample_students)
        service.log.error.assert_called_once()


class TestFailureFallback:
    """Tests for the cache and default tiers after a failed attempt."""

    def test_empty_cache_returns_defaults_without_notice(
        self, make_service, failing_client, online, notifier, mock_alerter
    ):
        service = make_service(failing_client, online)

        students, candidates = asyncio.run(service.fetch_both())

        assert students == default_students()
        assert candidates == default_candidates()
        assert len(students) == 5
        assert len(candidates) == 3
        assert notifier.banner is None
        mock_alerter.alert_offline_mode.assert_not_called()

    def test_single_dataset_defaults(self, make_service, failing_client, online, notifier):
        service = make_service(failing_client, online)

        result = asyncio.run(service.load_students())

        assert result.students == default_students()
        assert result.student_tier == DataTier.DEFAULT
        assert result.error == "unreachable"
        assert not notifier.visible

    def test_cached_data_shows_notice(self, make_service, failing_client, online, cache, notifier):
        cache.save(students=default_students()[:2], candidates=default_candidates()[:1])
        service = make_service(failing_client, online)

        result = asyncio.run(service.load_both())

        assert result.students == default_students()[:2]
        assert result.candidates == default_candidates()[:1]
        assert result.student_tier == DataTier.CACHED
        assert notifier.visible
        assert notifier.banner.reason == "unreachable"

    def test_mixed_tiers_for_both(self, make_service, failing_client, online, cache, notifier):
        cache.save(candidates=default_candidates()[:2])
        service = make_service(failing_client, online)

        result = asyncio.run(service.load_both())

        assert result.student_tier == DataTier.DEFAULT
        assert result.candidate_tier == DataTier.CACHED
        assert len(result.students) == 5
        assert len(result.candidates) == 2
        assert notifier.visible

    @pytest.mark.parametrize("error", [
        NetworkFailure("timeout"),
        HttpStatusFailure(502),
        ApplicationFailure("Hoja no encontrada"),
    ])
    def test_every_failure_kind_falls_back(self, make_service, online, cache, error):
        cache.save(students=default_students()[:1])
        client = Mock()
        client.fetch.side_effect = error
        service = make_service(client, online)

        students = asyncio.run(service.fetch_students())

        assert students == default_students()[:1]
        service.log.fetch_failed.assert_called_once()

    def test_malformed_records_fall_back(self, make_service, online, cache):
        cache.save(students=default_students())
        client = Mock()
        client.fetch.return_value = [{"carnet": "1"}]
        service = make_service(client, online)

        result = asyncio.run(service.load_students())

        assert result.student_tier == DataTier.CACHED
        assert result.students == default_students()

    def test_unexpected_error_does_not_propagate(self, make_service, online):
        client = Mock()
        client.fetch.side_effect = RuntimeError("boom")
        service = make_service(client, online)

        result = asyncio.run(service.load_candidates())

        assert result.candidates == default_candidates()
        assert "boom" in result.error

    def test_failed_get_both_leaves_cache_untouched(self, make_service, online, cache, memory_store):
        cache.save(
            students=default_students()[:3],
            candidates=default_candidates()[:2],
            synced_at=datetime(2024, 1, 1),
        )
        snapshot = {key: memory_store.get(key) for key in memory_store.keys()}

        client = Mock()
        # students present but candidates missing
        client.fetch.return_value = {"students": [s.to_payload() for s in default_students()]}
        service = make_service(client, online)

        asyncio.run(service.fetch_both())

        assert {key: memory_store.get(key) for key in memory_store.keys()} == snapshot

    def test_get_both_with_bad_candidate_leaves_cache_untouched(
        self, make_service, online, cache, memory_store, sample_students
    ):
        cache.save(students=default_students(), candidates=default_candidates())
        snapshot = {key: memory_store.get(key) for key in memory_store.keys()}

        client = Mock()
        client.fetch.return_value = {"students": sample_students, "candidates": [{"id": 1}]}
        service = make_service(client, online)

        students, candidates = asyncio.run(service.fetch_both())

        assert students == default_students()
        assert {key: memory_store.get(key) for key in memory_store.keys()} == snapshot


class TestEmptyLiveData:
    """An empty list from the endpoint is treated as a failed fetch."""

    def test_empty_students_returns_defaults(self, make_service, online):
        client = Mock()
        client.fetch.return_value = []
        service = make_service(client, online)

        result = asyncio.run(service.load_students())

        assert len(result.students) > 0
        assert result.students == default_students()
        assert result.student_tier == DataTier.DEFAULT
        assert "Empty student list" in result.error

    def test_empty_candidates_keeps_cached_copy(
        self, make_service, online, cache, memory_store, notifier
    ):
        cache.save(candidates=default_candidates()[:2], synced_at=datetime(2024, 1, 1))
        snapshot = {key: memory_store.get(key) for key in memory_store.keys()}
        client = Mock()
        client.fetch.return_value = []
        service = make_service(client, online)

        candidates = asyncio.run(service.fetch_candidates())

        assert candidates == default_candidates()[:2]
        assert {key: memory_store.get(key) for key in memory_store.keys()} == snapshot
        assert notifier.visible

    def test_get_both_with_empty_list_not_persisted(
        self, make_service, online, cache, memory_store, sample_students
    ):
        cache.save(students=default_students(), candidates=default_candidates())
        snapshot = {key: memory_store.get(key) for key in memory_store.keys()}
        client = Mock()
        client.fetch.return_value = {"students": sample_students, "candidates": []}
        service = make_service(client, online)

        result = asyncio.run(service.load_both())

        assert not result.live
        assert result.candidates == default_candidates()
        assert {key: memory_store.get(key) for key in memory_store.keys()} == snapshot


class TestOfflineSkip:
    """Tests for the deliberate offline path."""

    def test_returns_cache_without_network_or_notice(
        self, make_service, mock_client, offline, cache, notifier
    ):
        cache.save(students=default_students())
        service = make_service(mock_client, offline)

        result = asyncio.run(service.load_students())

        assert result.students == default_students()
        assert result.student_tier == DataTier.CACHED
        assert result.offline_skip
        mock_client.fetch.assert_not_called()
        assert notifier.banner is None

    def test_idempotent(self, make_service, mock_client, offline, cache):
        cache.save(students=default_students()[:4], candidates=default_candidates())
        service = make_service(mock_client, offline)

        first = asyncio.run(service.fetch_both())
        second = asyncio.run(service.fetch_both())

        assert first == second

    def test_empty_cache_still_not_empty(self, make_service, mock_client, offline):
        service = make_service(mock_client, offline)

        students = asyncio.run(service.fetch_students())
        candidates = asyncio.run(service.fetch_candidates())

        assert students == default_students()
        assert candidates == default_candidates()
        mock_client.fetch.assert_not_called()

    def test_flag_read_per_call(self, make_service, mock_client, offline, sample_students):
        service = make_service(mock_client, offline)
        asyncio.run(service.fetch_students())
        mock_client.fetch.assert_not_called()

        offline.set_online()
        students = asyncio.run(service.fetch_students())

        assert students == parse_students(sample_students)
        mock_client.fetch.assert_called_once()


def test_results_never_empty(make_service, offline, online, failing_client, mock_client, cache):
    for client, connectivity in (
        (mock_client, online),
        (failing_client, online),
        (mock_client, offline),
    ):
        service = make_service(client, connectivity)
        students, candidates = asyncio.run(service.fetch_both())
        assert len(students) > 0
        assert len(candidates) > 0
        assert len(asyncio.run(service.fetch_students())) > 0
        assert len(asyncio.run(service.fetch_candidates())) > 0
