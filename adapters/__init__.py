"""
ballotsync Adapters Module

Transport layer adapters (HTTP).
"""

# HTTP adapter functions are imported lazily to avoid the Flask dependency
# when running CLI commands that don't need HTTP

__all__ = [
    "handle_request",
    "handle_health",
    "handle_students",
    "handle_candidates",
    "handle_data",
    "handle_sync",
    "handle_status",
]


def __getattr__(name):
    """Lazy import HTTP handlers to avoid Flask dependency in CLI mode."""
    if name in __all__:
        from adapters import http
        return getattr(http, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
