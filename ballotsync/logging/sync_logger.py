"""
Sync Logger

Structured console logging bound to a request context.
"""

import logging
from typing import Optional

from ballotsync.context import RequestContext


class SyncLogger:
    """
    Structured logger for fetch and sync cycles.

    Usage:
        log = SyncLogger(ctx)
        log.info("Sync started")
        log.fetch_failed("getBoth", "HTTP error: 500")
        log.fallback("students", "cached", 5)
    """

    def __init__(
        self,
        ctx: RequestContext,
        name: str = "ballotsync",
        level: str = "INFO",
    ):
        self.ctx = ctx
        self._logger = logging.getLogger(name)

        # Ensure we have a handler
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self._logger.addHandler(handler)
            self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    def _log(
        self,
        level: int,
        message: str,
        dataset: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> None:
        """Internal log method."""
        prefix = f"[{self.ctx.request_id[:8]}]"
        if self.ctx.triggered_by:
            prefix += f" [{self.ctx.triggered_by}]"
        if dataset:
            prefix += f" [{dataset}]"

        full_message = f"{prefix} {message}"
        if data:
            details = ", ".join(f"{k}={v}" for k, v in data.items())
            full_message += f" ({details})"
        self._logger.log(level, full_message)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, error: Optional[str] = None, **kwargs) -> None:
        """Log error message."""
        if error:
            message = f"{message}: {error}"
        self._log(logging.ERROR, message, **kwargs)

    def fetch_failed(self, action: str, error: str, kind: str = "") -> None:
        """Log a recoverable fetch failure."""
        data = {"kind": kind} if kind else None
        self._log(logging.WARNING, f"Fetch {action} failed: {error}", data=data)

    def fallback(self, dataset: str, tier: str, count: int) -> None:
        """Log which fallback tier served a dataset."""
        self._log(
            logging.INFO,
            f"Serving {count} records from {tier} data",
            dataset=dataset,
        )

    def sync_started(self) -> None:
        self._log(logging.INFO, f"Sync started: {self.ctx.operation}")

    def sync_completed(self, data: Optional[dict] = None) -> None:
        self._log(logging.INFO, f"Sync completed: {self.ctx.operation}", data=data)

    def sync_failed(self, error: str, data: Optional[dict] = None) -> None:
        self._log(logging.ERROR, f"Sync failed: {self.ctx.operation} - {error}", data=data)


def get_logger(ctx: Optional[RequestContext] = None, level: str = "INFO") -> SyncLogger:
    """
    Create a SyncLogger for the given context.

    Args:
        ctx: Request context (a manual context is created if not provided)
        level: Log level applied when the handler is first installed

    Returns:
        Configured SyncLogger
    """
    if ctx is None:
        ctx = RequestContext.for_manual(operation="data_access")
    return SyncLogger(ctx, level=level)
