"""
ballotsync Core Module

Data access for the school election app: fetches the student roster and
the candidate list from a Google Sheets Apps Script endpoint, falls back
to a local cache or sample data, and reconciles the shared app state.
"""

from ballotsync.context import RequestContext
from ballotsync.config import Settings, get_settings
from ballotsync.models import AppState, Candidate, Student
from ballotsync.result import DataTier, FetchResult, ResultStatus, SyncResult
from ballotsync.bootstrap import SyncServices, build_services, get_services

__all__ = [
    "RequestContext",
    "Settings",
    "get_settings",
    "AppState",
    "Candidate",
    "Student",
    "DataTier",
    "FetchResult",
    "ResultStatus",
    "SyncResult",
    "SyncServices",
    "build_services",
    "get_services",
]
