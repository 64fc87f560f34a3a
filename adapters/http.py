"""
HTTP Adapter

Routes HTTP requests to the data access service and the reconciler.
"""

import asyncio
import logging
from typing import Callable, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from flask import Request

from ballotsync.bootstrap import SyncServices, get_services
from ballotsync.context import RequestContext
from ballotsync.result import FetchResult

logger = logging.getLogger(__name__)

# Type alias for HTTP response
HttpResponse = Tuple[dict, int]


def handle_request(request: "Request", services: Optional[SyncServices] = None) -> HttpResponse:
    """
    Main HTTP request router.

    Routes:
        GET  /health     - Health check
        GET  /students   - Student roster
        GET  /candidates - Candidate list
        GET  /data       - Both datasets in one call
        POST /sync       - Run a sync cycle
        GET  /status     - Connectivity, banner and cache state

    Args:
        request: Flask request object
        services: Wired services (process-wide instance if not provided)

    Returns:
        Tuple of (response_dict, status_code)
    """
    path = request.path.rstrip("/")

    routes: dict[str, Callable[["Request", SyncServices], HttpResponse]] = {
        "/health": handle_health,
        "/students": handle_students,
        "/candidates": handle_candidates,
        "/data": handle_data,
        "/sync": handle_sync,
        "/status": handle_status,
    }

    if services is None:
        services = get_services()

    # Also handle root path
    if path == "" or path == "/":
        return handle_health(request, services)

    handler = routes.get(path)
    if handler:
        return handler(request, services)

    return {"error": f"Unknown path: {path}", "available": list(routes.keys())}, 404


def _fetch_response(result: FetchResult) -> HttpResponse:
    data = result.to_dict()
    body = {
        "success": True,
        "live": result.live,
        "data": {key: data[key] for key in ("students", "candidates") if key in data},
        "source": {
            key: data[key] for key in ("student_source", "candidate_source") if key in data
        },
    }
    if result.error:
        body["warning"] = result.error
    return body, 200


def handle_health(request: "Request", services: SyncServices) -> HttpResponse:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "ballotsync",
        "online": services.connectivity.is_online,
        "configured": services.settings.is_configured(),
    }, 200


def handle_students(request: "Request", services: SyncServices) -> HttpResponse:
    """Student roster, from the best available tier."""
    return _fetch_response(asyncio.run(services.service.load_students()))


def handle_candidates(request: "Request", services: SyncServices) -> HttpResponse:
    """Candidate list, from the best available tier."""
    return _fetch_response(asyncio.run(services.service.load_candidates()))


def handle_data(request: "Request", services: SyncServices) -> HttpResponse:
    """Both datasets with a single remote call."""
    return _fetch_response(asyncio.run(services.service.load_both()))


def handle_sync(request: "Request", services: SyncServices) -> HttpResponse:
    """
    Run a sync cycle.

    Request body (optional):
        {"correlation_id": "..."}

    Returns:
        Sync result and the reconciled vote tally; 503 when the cycle failed
    """
    if request.method != "POST":
        return {"error": "Use POST to run a sync"}, 405

    data = request.get_json(force=True, silent=True) or {}
    if not isinstance(data, dict):
        return {"error": "JSON body must be an object"}, 400

    ctx = RequestContext.for_http(
        operation="sync",
        correlation_id=data.get("correlation_id"),
        environment=services.settings.environment,
    )

    logger.info(f"Sync requested over HTTP ({ctx.request_id})")
    result = asyncio.run(services.reconciler.sync(ctx))

    body = {
        "success": result.success,
        "request_id": ctx.request_id,
        "result": result.to_dict(),
    }
    if result.success:
        body["votes"] = {str(k): v for k, v in services.state.votes.items()}
        return body, 200
    return body, 503


def handle_status(request: "Request", services: SyncServices) -> HttpResponse:
    """Connectivity, banner and cache state."""
    return services.status(), 200
