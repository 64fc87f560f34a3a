"""
Pytest Fixtures for ballotsync Tests

Provides fake collaborators and sample payloads.
"""

import pytest
from unittest.mock import Mock

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ballotsync.clients.apps_script import Action, AppsScriptClient
from ballotsync.connectivity import ConnectivityMonitor
from ballotsync.context import RequestContext
from ballotsync.models import AppState
from ballotsync.notifier import OfflineNotifier
from ballotsync.reconciler import StateReconciler
from ballotsync.service import DataAccessService
from ballotsync.storage.cache import LocalCache
from ballotsync.storage.kv import MemoryStore


@pytest.fixture
def sample_students():
    """Student records as delivered by the endpoint."""
    return [
        {"carnet": "2024101", "nombre": "Valeria Ruiz", "curso": "11-A", "habilitado": True},
        {"carnet": "2024102", "nombre": "Mateo Castro", "curso": "11-B", "habilitado": True},
        {"carnet": "2024103", "nombre": "Lucía Vega", "curso": "10-A", "habilitado": False},
    ]


@pytest.fixture
def sample_candidates():
    """Candidate records as delivered by the endpoint."""
    return [
        {
            "id": 1,
            "nombre": "Sofía Hernández",
            "sigla": "SH",
            "foto": "https://example.org/sh.png",
            "propuestas": "Más deporte",
        },
        {
            "id": 3,
            "nombre": "Andrés Pineda",
            "sigla": "AP",
            "foto": "https://example.org/ap.png",
            "propuestas": "Biblioteca abierta",
        },
    ]


@pytest.fixture
def mock_client(sample_students, sample_candidates):
    """Apps Script client answering every action successfully."""
    client = Mock(spec=AppsScriptClient)

    def fetch(action):
        action = Action(action)
        if action == Action.GET_STUDENTS:
            return sample_students
        if action == Action.GET_CANDIDATES:
            return sample_candidates
        return {"students": sample_students, "candidates": sample_candidates}

    client.fetch.side_effect = fetch
    return client


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def cache(memory_store):
    return LocalCache(memory_store)


@pytest.fixture
def online():
    return ConnectivityMonitor(online=True)


@pytest.fixture
def offline():
    return ConnectivityMonitor(online=False)


@pytest.fixture
def mock_alerter():
    """Create a mock Slack alerter."""
    alerter = Mock()

    alerter.alert_offline_mode.return_value = True
    alerter.alert_sync_failed.return_value = True
    alerter.alert_custom.return_value = True

    return alerter


@pytest.fixture
def notifier(mock_alerter):
    return OfflineNotifier(alerter=mock_alerter)


@pytest.fixture
def mock_logger():
    """Create a mock SyncLogger."""
    return Mock()


@pytest.fixture
def service(mock_client, cache, online, notifier, mock_logger):
    """Data access service wired to fakes, online."""
    return DataAccessService(
        client=mock_client,
        cache=cache,
        connectivity=online,
        notifier=notifier,
        log=mock_logger,
    )


@pytest.fixture
def app_state():
    return AppState()


@pytest.fixture
def reconciler(service, app_state, online, notifier, mock_alerter):
    return StateReconciler(
        service=service,
        state=app_state,
        connectivity=online,
        notifier=notifier,
        alerter=mock_alerter,
    )


@pytest.fixture
def test_context():
    """Create a test RequestContext."""
    return RequestContext(
        request_id="test-request-123",
        operation="sync",
        triggered_by="test",
    )
