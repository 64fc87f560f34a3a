"""
ballotsync Logging Module

Structured logging bound to request contexts.
"""

from ballotsync.logging.sync_logger import SyncLogger, get_logger

__all__ = [
    "SyncLogger",
    "get_logger",
]
