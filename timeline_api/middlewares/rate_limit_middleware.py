"""
Rate limiting using slowapi.
Slows down brute-force guessing of public share tokens.
"""
import logging
from typing import Callable

from fastapi import Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from timeline_api.config import get_settings
from timeline_api.utils.client_ip import get_client_ip
from timeline_api.utils.prometheus_metrics import rate_limit_hits_total

logger = logging.getLogger("timeline_api.rate_limit")
settings = get_settings()


def get_client_identifier(request: Request) -> str:
    """Rate limit key: client IP behind proxies, "unknown" if none."""
    return get_client_ip(request) or "unknown"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)


def setup_rate_limit(app) -> None:
    """
    Attach the limiter to the app and register the 429 handler.
    """
    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        endpoint = request.scope.get("route").path if request.scope.get("route") else request.url.path
        rate_limit_hits_total.labels(endpoint=endpoint).inc()

        logger.warning(
            "Rate limit exceeded",
            extra={
                "event": "rate_limit",
                "endpoint": endpoint,
                "limit": str(exc.detail),
            },
        )
        return _rate_limit_exceeded_handler(request, exc)


def get_rate_limit_decorator(limit: str) -> Callable:
    """
    Rate limit decorator helper.

    Args:
        limit: slowapi limit string (e.g. "30/minute")
    """
    if not settings.rate_limit_enabled:
        def noop_decorator(func: Callable) -> Callable:
            return func
        return noop_decorator

    return limiter.limit(limit)
