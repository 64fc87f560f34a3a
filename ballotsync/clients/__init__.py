"""
ballotsync Clients Module

External service clients for the spreadsheet endpoint.
"""

from ballotsync.clients.apps_script import Action, AppsScriptClient

__all__ = [
    "Action",
    "AppsScriptClient",
]
