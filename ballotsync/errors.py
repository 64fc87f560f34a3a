"""
Data source errors.

Every failure of a remote fetch is raised as one of these and handled
by the data access service as a recoverable failure.
"""

from typing import Optional


class DataSourceError(Exception):
    """Base class for recoverable remote data source failures."""

    kind = "data_source"

    def __init__(self, message: str, action: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.action = action

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "kind": self.kind,
            "message": self.message,
            "action": self.action,
        }


class NetworkFailure(DataSourceError):
    """Endpoint unreachable, connection dropped or request timed out."""

    kind = "network"


class HttpStatusFailure(DataSourceError):
    """Endpoint answered with a non-2xx status."""

    kind = "http_status"

    def __init__(self, status_code: int, action: Optional[str] = None):
        super().__init__(f"HTTP error: {status_code}", action=action)
        self.status_code = status_code

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class ApplicationFailure(DataSourceError):
    """Body reported success=false, or could not be parsed as an envelope."""

    kind = "application"


class ValidationFailure(DataSourceError):
    """Payload is missing expected keys or records are wrongly shaped."""

    kind = "validation"
