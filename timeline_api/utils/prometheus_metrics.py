"""
Prometheus metrics for stability, availability and the public sharing flow.

- FastAPI: request count, latency (Instrumentator)
- Stability: exceptions_total, db_errors_total
- HA: ready gauge (1=up, 0=shutting down), in-flight requests
- Sharing: share link creation/revocation, public access outcome and latency
"""
import logging
import socket

from prometheus_client import REGISTRY, Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from timeline_api.config import get_settings

logger = logging.getLogger(__name__)

# --- Stability ---
exceptions_total = Counter(
    "timeline_api_exceptions_total",
    "Total unhandled exceptions",
    registry=REGISTRY,
)
db_errors_total = Counter(
    "timeline_api_db_errors_total",
    "Total database session/transaction errors",
    registry=REGISTRY,
)

# --- HA ---
ready = Gauge(
    "timeline_api_ready",
    "Application ready (1=up, 0=shutting down)",
    registry=REGISTRY,
)

in_flight_requests = Gauge(
    "timeline_api_in_flight_requests",
    "Number of requests currently being processed",
    registry=REGISTRY,
)

# --- Rate Limiting ---
rate_limit_hits_total = Counter(
    "timeline_api_rate_limit_hits_total",
    "Total number of rate limit hits (requests blocked)",
    ["endpoint"],
    registry=REGISTRY,
)

# --- Auth ---
user_registration_total = Counter(
    "timeline_api_user_registration_total",
    "Total user registration attempts",
    ["result"],  # success | failure
    registry=REGISTRY,
)
user_login_total = Counter(
    "timeline_api_user_login_total",
    "Total login attempts",
    ["result"],  # success | failure
    registry=REGISTRY,
)

# --- Timelines ---
timeline_operations_total = Counter(
    "timeline_api_timeline_operations_total",
    "Total timeline CRUD operations",
    ["operation", "result"],  # operation: create | update | delete
    registry=REGISTRY,
)

# --- Public sharing ---
share_link_operations_total = Counter(
    "timeline_api_share_link_operations_total",
    "Owner-side share link operations",
    ["operation"],  # create | rotate | revoke
    registry=REGISTRY,
)

# Only the outcome is labelled. Denials are not split by cause.
share_link_access_total = Counter(
    "timeline_api_share_link_access_total",
    "Total public timeline access attempts",
    ["result"],  # success | denied
    registry=REGISTRY,
)

share_link_access_duration_seconds = Histogram(
    "timeline_api_share_link_access_duration_seconds",
    "Public timeline access duration in seconds",
    ["result"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=REGISTRY,
)

orphaned_shares_total = Counter(
    "timeline_api_orphaned_shares_total",
    "Share rows found pointing at a missing timeline",
    registry=REGISTRY,
)


def _node_identity() -> str:
    """Instance identifier for the app_info gauge."""
    ip = (get_settings().instance_ip or "").strip()
    return ip or socket.gethostname()


def setup_prometheus(app) -> None:
    """
    Register Prometheus instrumentation.

    1. app_info gauge (node, version, environment).
    2. Instrumentator request metrics, exposed at /metrics.
    """
    settings = get_settings()

    app_info = Gauge(
        "timeline_api_app_info",
        "Application and node identity (labels only, value is 1)",
        ["node", "app", "version", "environment"],
        registry=REGISTRY,
    )
    app_info.labels(
        node=_node_identity(),
        app=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    ).set(1)

    Instrumentator(should_group_status_codes=False).instrument(app).expose(
        app, endpoint="/metrics"
    )
