"""
Offline Notifier

Keeps the single "using cached data" banner and its retry action.
Rendering is left to the host UI, which reads ``banner`` or registers a
listener.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ballotsync.alerts.slack import SlackAlerter

logger = logging.getLogger(__name__)

OFFLINE_MESSAGE = "⚠️ Usando datos en caché - Sin conexión a Google Sheets"
RETRY_LABEL = "Reintentar"

RetryAction = Callable[[], Awaitable[Any]]
BannerListener = Callable[["Banner"], None]


@dataclass
class Banner:
    """The persistent offline banner."""
    message: str = OFFLINE_MESSAGE
    retry_label: str = RETRY_LABEL
    visible: bool = False
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "retry_label": self.retry_label,
            "visible": self.visible,
            "reason": self.reason,
        }


class OfflineNotifier:
    """
    Binary visibility state over one banner.

    show() creates the banner on first use and reuses it afterwards;
    hide() is a no-op when there is nothing visible. The retry action is
    bound once at wiring time and re-runs the sync cycle.
    """

    def __init__(
        self,
        alerter: Optional[SlackAlerter] = None,
        message: str = OFFLINE_MESSAGE,
        retry_label: str = RETRY_LABEL,
    ):
        self.alerter = alerter
        self.message = message
        self.retry_label = retry_label
        self._banner: Optional[Banner] = None
        self._retry: Optional[RetryAction] = None
        self._listeners: list[BannerListener] = []

    @property
    def banner(self) -> Optional[Banner]:
        return self._banner

    @property
    def visible(self) -> bool:
        return self._banner is not None and self._banner.visible

    def bind_retry(self, action: RetryAction) -> None:
        """Set the coroutine function run by the banner's retry button."""
        self._retry = action

    def subscribe(self, listener: BannerListener) -> Callable[[], None]:
        """Register a listener called with the banner on every visibility change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._banner)
            except Exception as e:
                logger.error(f"Banner listener failed: {e}")

    def show(self, reason: Optional[str] = None) -> Banner:
        """Make the banner visible, creating it on first call."""
        if self._banner is None:
            self._banner = Banner(message=self.message, retry_label=self.retry_label)

        was_visible = self._banner.visible
        self._banner.visible = True
        self._banner.reason = reason or self._banner.reason

        if not was_visible:
            logger.warning(f"Offline mode: {self._banner.message}")
            if self.alerter is not None:
                self.alerter.alert_offline_mode(reason)
            self._notify()

        return self._banner

    def hide(self) -> None:
        """Hide the banner if it exists and is visible."""
        if self._banner is None or not self._banner.visible:
            return

        self._banner.visible = False
        self._banner.reason = None
        logger.info("Offline banner hidden")
        self._notify()

    async def retry(self) -> Any:
        """Run the bound retry action (the sync cycle)."""
        if self._retry is None:
            logger.warning("Retry requested but no retry action is bound")
            return None
        return await self._retry()
