"""
ballotsync Alerts Module

Alert notifications via Slack.
"""

from ballotsync.alerts.slack import SlackAlerter, NoOpAlerter

__all__ = [
    "SlackAlerter",
    "NoOpAlerter",
]
