"""
Tests for the Apps Script client
"""

import threading
import time

import pytest
import requests
from unittest.mock import Mock, patch

from ballotsync.clients.apps_script import Action, AppsScriptClient
from ballotsync.config import Settings
from ballotsync.errors import (
    ApplicationFailure,
    DataSourceError,
    HttpStatusFailure,
    NetworkFailure,
    ValidationFailure,
)

URL = "https://script.google.com/macros/s/abc/exec"
SESSION_CLASS = requests.Session


def make_response(status_code=200, body=None, json_error=False):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return AppsScriptClient(URL, timeout=5, session=session)


class TestFetch:
    """Tests for AppsScriptClient.fetch."""

    def test_success_returns_data(self, client, session, sample_students):
        session.get.return_value = make_response(body={"success": True, "data": sample_students})

        data = client.fetch(Action.GET_STUDENTS)

        assert data == sample_students
        session.get.assert_called_once_with(URL, params={"action": "getStudents"}, timeout=5)

    def test_accepts_plain_string_action(self, client, session):
        session.get.return_value = make_response(body={"success": True, "data": []})

        client.fetch("getCandidates")

        assert session.get.call_args.kwargs["params"] == {"action": "getCandidates"}

    def test_http_error(self, client, session):
        session.get.return_value = make_response(status_code=500)

        with pytest.raises(HttpStatusFailure) as exc_info:
            client.fetch(Action.GET_STUDENTS)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "HTTP error: 500"
        assert exc_info.value.action == "getStudents"

    def test_application_error_message(self, client, session):
        session.get.return_value = make_response(
            body={"success": False, "error": "Hoja no encontrada"}
        )

        with pytest.raises(ApplicationFailure, match="Hoja no encontrada"):
            client.fetch(Action.GET_CANDIDATES)

    def test_application_error_generic(self, client, session):
        session.get.return_value = make_response(body={"success": False})

        with pytest.raises(ApplicationFailure, match="Unknown error"):
            client.fetch(Action.GET_CANDIDATES)

    def test_invalid_json(self, client, session):
        session.get.return_value = make_response(json_error=True)

        with pytest.raises(ApplicationFailure):
            client.fetch(Action.GET_BOTH)

    def test_non_object_body(self, client, session):
        session.get.return_value = make_response(body=["not", "an", "envelope"])

        with pytest.raises(ApplicationFailure):
            client.fetch(Action.GET_BOTH)

    def test_timeout(self, client, session):
        session.get.side_effect = requests.Timeout("read timed out")

        with pytest.raises(NetworkFailure, match="timed out"):
            client.fetch(Action.GET_STUDENTS)

    def test_connection_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(NetworkFailure):
            client.fetch(Action.GET_STUDENTS)

    def test_get_both_missing_key(self, client, session, sample_students):
        session.get.return_value = make_response(
            body={"success": True, "data": {"students": sample_students}}
        )

        with pytest.raises(ValidationFailure):
            client.fetch(Action.GET_BOTH)

    def test_concurrent_fetches_share_one_session(self):
        client = AppsScriptClient(URL)
        created = []
        start = threading.Barrier(4)

        def make_session():
            time.sleep(0.01)
            session = Mock(spec=SESSION_CLASS)
            session.get.return_value = make_response(body={"success": True, "data": []})
            created.append(session)
            return session

        def worker():
            start.wait()
            client.fetch(Action.GET_STUDENTS)

        with patch("ballotsync.clients.apps_script.requests.Session", side_effect=make_session):
            threads = [threading.Thread(target=worker) for _ in range(4)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert len(created) == 1
        assert created[0].get.call_count == 4

    def test_unconfigured_fails_fast(self, session):
        client = AppsScriptClient("", session=session)

        with pytest.raises(NetworkFailure, match="not configured"):
            client.fetch(Action.GET_STUDENTS)

        session.get.assert_not_called()

    def test_all_failures_share_base(self):
        for error_class in (NetworkFailure, ApplicationFailure, ValidationFailure):
            assert issubclass(error_class, DataSourceError)
        assert isinstance(HttpStatusFailure(404), DataSourceError)


class TestFromSettings:
    """Tests for building the client from settings."""

    def test_configured(self):
        client = AppsScriptClient.from_settings(
            Settings(apps_script_url=URL, request_timeout=7.5)
        )

        assert client.url == URL
        assert client.timeout == 7.5
        assert client.configured

    def test_disabled(self):
        client = AppsScriptClient.from_settings(
            Settings(apps_script_url=URL, use_apps_script=False)
        )
        assert not client.configured

    def test_placeholder(self):
        client = AppsScriptClient.from_settings(
            Settings(apps_script_url="YOUR_APPS_SCRIPT_URL")
        )
        assert not client.configured


def test_close_releases_session(client, session):
    client.close()

    session.close.assert_called_once()
    assert client._session is None
