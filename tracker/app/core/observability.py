"""
Observability helpers.

Logging setup plus a middleware that adds correlation IDs and a structured
log record to every request.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Configure structured logger
logger = logging.getLogger("tracker.http")


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once; later calls only adjust the level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level.upper())


def request_context(request: Request) -> dict:
    """
    Parcel context of a routed request.
    
    Route parameters are only known once routing has run, so call this after
    the response is produced. Values are the raw path strings.
    """
    path_params = request.path_params
    context = {}
    if "number" in path_params:
        context["parcel_number"] = path_params["number"]
    if "client" in path_params:
        context["client"] = path_params["client"]
    return context


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Correlation ID, timing headers and one log record per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        started = time.perf_counter()
        
        response = await call_next(request)
        
        duration_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"
        
        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            **request_context(request),
        }
        
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, "%s %s -> %d", request.method, request.url.path, response.status_code, extra=log_data)
        
        return response
