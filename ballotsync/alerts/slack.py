"""
Slack Webhook Alerts

Send notifications to Slack when the app falls back to cached data or a
sync cycle fails.
"""

import logging
from typing import Optional

import requests

from ballotsync.config import Settings
from ballotsync.context import RequestContext
from ballotsync.result import SyncResult

logger = logging.getLogger(__name__)


class SlackAlerter:
    """
    Slack webhook alerter.

    Usage:
        alerter = SlackAlerter(webhook_url, channel)
        alerter.alert_offline_mode("HTTP error: 503")
        alerter.alert_sync_failed(ctx, sync_result)
    """

    def __init__(
        self,
        webhook_url: str,
        channel: str = "#ballotsync-alerts",
        enabled: bool = True,
        timeout: float = 10,
    ):
        self.webhook_url = webhook_url
        self.channel = channel
        self.enabled = enabled and bool(webhook_url)
        self.timeout = timeout

    def _send(self, payload: dict) -> bool:
        """Send payload to Slack webhook."""
        if not self.enabled:
            logger.debug("Slack alerts disabled, skipping")
            return True

        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error(f"Failed to send Slack alert: {e}")
            return False

    def _build_blocks(
        self,
        title: str,
        color: str,
        fields: list[dict],
        footer: Optional[str] = None,
    ) -> dict:
        """Build Slack message payload with blocks."""
        attachment = {
            "color": color,
            "blocks": [
                {
                    "type": "header",
                    "text": {"type": "plain_text", "text": title, "emoji": True}
                },
                {
                    "type": "section",
                    "fields": [
                        {"type": "mrkdwn", "text": f"*{f['title']}*\n{f['value']}"}
                        for f in fields
                    ]
                }
            ]
        }

        if footer:
            attachment["blocks"].append({
                "type": "context",
                "elements": [{"type": "mrkdwn", "text": footer}]
            })

        return {"channel": self.channel, "attachments": [attachment]}

    def alert_offline_mode(self, reason: Optional[str] = None) -> bool:
        """
        Send alert when cached data is being served instead of live data.

        Args:
            reason: Failure that caused the fallback

        Returns:
            True if sent successfully
        """
        fields = [
            {"title": "Source", "value": "Local cache"},
            {"title": "Reason", "value": (reason or "Unknown")[:200]},
        ]

        payload = self._build_blocks(
            title=":warning: Serving cached data",
            color="#ffc107",  # Yellow
            fields=fields,
        )

        return self._send(payload)

    def alert_sync_failed(self, ctx: RequestContext, result: SyncResult) -> bool:
        """
        Send alert for a failed sync cycle.

        Args:
            ctx: Request context
            result: Sync result

        Returns:
            True if sent successfully
        """
        error = result.errors[0] if result.errors else "Unknown error"
        fields = [
            {"title": "Status", "value": result.status.value},
            {"title": "Error", "value": error[:200]},
            {"title": "Triggered By", "value": ctx.triggered_by},
        ]

        payload = self._build_blocks(
            title=":x: Sync Failed",
            color="#dc3545",  # Red
            fields=fields,
            footer=f"Request ID: {ctx.request_id}",
        )

        return self._send(payload)

    def alert_custom(
        self,
        title: str,
        message: str,
        color: str = "#17a2b8",
        fields: Optional[list[dict]] = None,
    ) -> bool:
        """
        Send a custom alert.

        Args:
            title: Alert title
            message: Alert message
            color: Attachment color (hex)
            fields: Optional list of {"title": str, "value": str}

        Returns:
            True if sent successfully
        """
        payload_fields = [{"title": "Message", "value": message}]
        if fields:
            payload_fields.extend(fields)

        payload = self._build_blocks(
            title=title,
            color=color,
            fields=payload_fields,
        )

        return self._send(payload)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SlackAlerter":
        """Build an alerter, or a NoOpAlerter when no webhook is configured."""
        if not settings.slack_webhook_url:
            return NoOpAlerter()
        return cls(
            webhook_url=settings.slack_webhook_url,
            channel=settings.slack_channel,
        )


class NoOpAlerter(SlackAlerter):
    """No-op alerter for testing/development."""

    def __init__(self):
        super().__init__(webhook_url="", enabled=False)
        logger.debug("Using NoOp alerter (no Slack notifications)")

    def _send(self, payload: dict) -> bool:
        logger.info(f"[NOOP ALERT] {payload.get('attachments', [{}])[0].get('blocks', [{}])[0]}")
        return True
