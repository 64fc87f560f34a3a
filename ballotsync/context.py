"""
Request Context for threading audit information through fetches and syncs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid


@dataclass
class RequestContext:
    """
    Context object that flows through a sync cycle for log correlation.

    Attributes:
        request_id: Unique identifier for this request
        operation: Name of the operation (sync, fetch_students, ...)
        triggered_by: Source of the trigger (manual, reconnect, retry, http, cli)
        triggered_at: Timestamp when request was initiated
        environment: Runtime environment
        correlation_id: Optional ID for correlating related requests
    """
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    triggered_by: str = "unknown"
    triggered_at: datetime = field(default_factory=datetime.utcnow)
    environment: str = ""
    correlation_id: Optional[str] = None

    def to_audit_dict(self) -> dict:
        """Convert context to dict for logging."""
        return {
            "request_id": self.request_id,
            "operation": self.operation,
            "triggered_by": self.triggered_by,
            "triggered_at": self.triggered_at.isoformat(),
            "environment": self.environment,
            "correlation_id": self.correlation_id,
        }

    @classmethod
    def for_manual(cls, operation: str = "sync", **kwargs) -> "RequestContext":
        """Create context for a call made directly by the host application."""
        return cls(operation=operation, triggered_by="manual", **kwargs)

    @classmethod
    def for_reconnect(cls, operation: str = "sync", **kwargs) -> "RequestContext":
        """Create context for a sync triggered by the connectivity monitor."""
        return cls(operation=operation, triggered_by="reconnect", **kwargs)

    @classmethod
    def for_retry(cls, operation: str = "sync", **kwargs) -> "RequestContext":
        """Create context for a sync triggered from the offline banner."""
        return cls(operation=operation, triggered_by="retry", **kwargs)

    @classmethod
    def for_http(cls, operation: str, **kwargs) -> "RequestContext":
        """Create context for HTTP request."""
        return cls(operation=operation, triggered_by="http", **kwargs)

    @classmethod
    def for_cli(cls, operation: str, **kwargs) -> "RequestContext":
        """Create context for CLI invocation."""
        return cls(operation=operation, triggered_by="cli", **kwargs)
