"""
Structured request logging middleware.

Assigns a request id to every request and logs failing or slow requests.
"""
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from timeline_api.utils.client_ip import get_client_ip
from timeline_api.utils.logger import log_error, log_warning, set_request_id

SLOW_REQUEST_THRESHOLD_MS = 3000

REQUEST_ID_HEADER = "X-Request-ID"

EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc", "/metrics", "/favicon.ico"}

# Public URLs carry the share token; only the route template is logged
PUBLIC_PATH_PREFIX = "/public/timeline/"


def _loggable_path(request: Request) -> str:
    path = request.url.path
    if path.startswith(PUBLIC_PATH_PREFIX):
        return PUBLIC_PATH_PREFIX + "{token}"
    return path


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging.

    - 5xx responses and exceptions -> ERROR
    - 4xx responses -> WARNING
    - responses slower than 3s -> WARNING
    - successful responses are not logged
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        rid = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        context = {
            "http_method": request.method,
            "http_path": _loggable_path(request),
            "client_ip": get_client_ip(request),
            "user_agent": request.headers.get("user-agent"),
            "request_id": rid,
            "event": "request",
        }

        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            log_error(
                "Request exception",
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                exc_info=True,
                **context,
            )
            raise

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = rid
        status_code = response.status_code

        if status_code >= 500:
            log_error(
                "Request error - Server error occurred",
                http_status=status_code,
                duration_ms=duration_ms,
                **context,
            )
        elif status_code >= 400:
            log_warning(
                "Request failed - Client error",
                http_status=status_code,
                duration_ms=duration_ms,
                **context,
            )
        elif duration_ms >= SLOW_REQUEST_THRESHOLD_MS:
            log_warning(
                "Slow request detected",
                http_status=status_code,
                duration_ms=duration_ms,
                **context,
            )

        return response
