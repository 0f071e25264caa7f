"""
FastAPI Timeline API Application.

Main application entry point that configures:
- CORS middleware
- API routers
- Database lifecycle
- Logging system
- Exception handlers
- Rate limiting on public share links
- Prometheus metrics
- Graceful shutdown
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timeline_api.config import get_settings
from timeline_api.database import close_db, init_db
from timeline_api.middlewares.logging_middleware import LoggingMiddleware
from timeline_api.middlewares.rate_limit_middleware import setup_rate_limit
from timeline_api.middlewares.request_tracking_middleware import (
    RequestTrackingMiddleware,
    wait_for_requests,
)
from timeline_api.routers import (
    auth_router,
    health_router,
    public_router,
    share_router,
    timelines_router,
    vendors_router,
)
from timeline_api.utils.logger import get_request_id, log_error, log_info, setup_logging
from timeline_api.utils.prometheus_metrics import exceptions_total, ready, setup_prometheus

settings = get_settings()

setup_logging()

SHUTDOWN_DRAIN_TIMEOUT = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan.

    Shutdown flow:
    1. Health checks fail immediately (ready=0)
    2. In-flight requests are drained (up to 30 seconds)
    3. Database connections are closed
    """
    await init_db()
    ready.set(1)
    log_info(
        "Application startup completed",
        event="lifecycle",
        version=settings.app_version,
        environment=settings.environment.value,
    )

    yield

    ready.set(0)
    log_info("Application shutdown initiated", event="lifecycle")

    await wait_for_requests(timeout=SHUTDOWN_DRAIN_TIMEOUT)
    await close_db()

    log_info("Graceful shutdown completed", event="lifecycle")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
## Timeline API

Plan event-day timelines and share them through public read-only links.

### Features
- **User Management**: Registration and JWT authentication
- **Timelines**: Categories and ordered events for each timeline
- **Vendors**: Address book of participants, linked to timelines and events
- **Sharing**: Unguessable public links with optional expiry and vendor visibility

### Authentication
Most endpoints require authentication via Bearer token.
Use the `/auth/login` endpoint to get a token.
Public timeline links need no authentication.
    """,
    openapi_tags=[
        {"name": "Authentication", "description": "User registration and login"},
        {"name": "Timelines", "description": "Timelines, categories, events and vendor links"},
        {"name": "Vendors", "description": "Vendor and vendor type management"},
        {"name": "Sharing", "description": "Owner-side public link management"},
        {"name": "Public Timelines", "description": "Anonymous access to shared timelines"},
    ],
    lifespan=lifespan,
)

# Prometheus: FastAPI metrics + node info at /metrics
setup_prometheus(app)

# Rate limiting: limiter state and 429 handler
setup_rate_limit(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add structured logging middleware
app.add_middleware(LoggingMiddleware)
# In-flight request tracking for graceful shutdown
app.add_middleware(RequestTrackingMiddleware)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Unhandled exception handler with structured logging.

    Logs at ERROR and returns a 500 carrying the request id for support.
    """
    exceptions_total.inc()
    rid = get_request_id()

    log_error(
        "Unhandled exception occurred",
        error_type=type(exc).__name__,
        error_message=str(exc),
        error_code="INTERNAL_SERVER_ERROR",
        http_method=request.method,
        http_path=request.url.path,
        request_id=rid,
        event="exception",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "request_id": rid,
        },
    )


# Include routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(timelines_router)
app.include_router(share_router)
app.include_router(vendors_router)
app.include_router(public_router)


# Root endpoint
@app.get(
    "/",
    tags=["Root"],
    summary="API information",
)
async def root():
    """
    Root endpoint with API information.
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
