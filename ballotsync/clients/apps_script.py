"""
Google Apps Script Client

Fetches the roster and the candidate list from the Apps Script web app
that fronts the spreadsheet.
"""

import logging
import threading
from enum import Enum
from typing import Any, Optional

import requests

from ballotsync.config import Settings
from ballotsync.errors import (
    ApplicationFailure,
    HttpStatusFailure,
    NetworkFailure,
    ValidationFailure,
)

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Value of the ``action`` query parameter understood by the web app."""
    GET_STUDENTS = "getStudents"
    GET_CANDIDATES = "getCandidates"
    GET_BOTH = "getBoth"


class AppsScriptClient:
    """
    HTTP client for the Apps Script endpoint.

    One GET per call, no retries. Every failure is raised as a
    DataSourceError subclass.

    Usage:
        client = AppsScriptClient(url, timeout=15)
        students = client.fetch(Action.GET_STUDENTS)
        both = client.fetch(Action.GET_BOTH)  # {"students": [...], "candidates": [...]}
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url.strip()
        self.timeout = timeout
        self._session = session
        # fetch() may run in several worker threads at once
        self._session_lock = threading.Lock()

    def _get_session(self) -> requests.Session:
        """Get or create HTTP session."""
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def fetch(self, action: Action) -> Any:
        """
        Call the endpoint and return the ``data`` member of the envelope.

        Args:
            action: Remote action

        Returns:
            Decoded payload

        Raises:
            NetworkFailure: Connection error or timeout
            HttpStatusFailure: Non-2xx status
            ApplicationFailure: Unparseable body or success=false
            ValidationFailure: getBoth payload without students/candidates
        """
        action = Action(action)
        if not self.configured:
            raise NetworkFailure("Apps Script URL not configured", action=action.value)

        try:
            response = self._get_session().get(
                self.url,
                params={"action": action.value},
                timeout=self.timeout,
            )
        except requests.Timeout:
            raise NetworkFailure(f"Request timed out after {self.timeout}s", action=action.value)
        except requests.RequestException as e:
            raise NetworkFailure(f"Request failed: {e}", action=action.value)

        if not response.ok:
            raise HttpStatusFailure(response.status_code, action=action.value)

        try:
            body = response.json()
        except ValueError:
            raise ApplicationFailure("Response body is not valid JSON", action=action.value)

        if not isinstance(body, dict):
            raise ApplicationFailure("Response body is not a JSON object", action=action.value)

        if not body.get("success"):
            raise ApplicationFailure(body.get("error") or "Unknown error", action=action.value)

        data = body.get("data")
        if action == Action.GET_BOTH:
            if not isinstance(data, dict) or data.get("students") is None or data.get("candidates") is None:
                raise ValidationFailure(
                    "Invalid data structure received from Apps Script",
                    action=action.value,
                )

        logger.debug(f"Fetched {action.value} from Apps Script")
        return data

    def close(self) -> None:
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppsScriptClient":
        """
        Build a client from settings.

        The URL is left empty when the endpoint is disabled or still holds a
        placeholder, so every fetch fails fast and callers fall back.
        """
        url = settings.apps_script_url if settings.is_configured() else ""
        return cls(url=url, timeout=settings.request_timeout)
