"""
Python logging setup for the API.

Levels:
- INFO: business events (registration, timeline created, share link created/rotated/revoked)
- WARNING: client errors (bad credentials, denied public access, orphaned shares)
- ERROR: system errors

Output:
- stdout: human readable text
- <log_dir>/app.log, <log_dir>/error.log: NDJSON, one object per line

Personal data and credentials (email, username, password, tokens) are never
written to the structured context.
"""
import contextvars
import json
import logging
import socket
import sys
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from timeline_api.config import get_settings

logger = logging.getLogger("timeline_api")

_SENSITIVE_FIELDS = frozenset({
    "email", "username", "password", "token", "share_token", "secret", "authorization",
})

request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def _get_instance_id() -> str:
    """INSTANCE_IP from settings, falling back to the hostname."""
    ip = (get_settings().instance_ip or "").strip()
    return ip or socket.gethostname()


INSTANCE_ID = _get_instance_id()


def generate_request_id() -> str:
    """New short request id."""
    return uuid.uuid4().hex[:12]


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the request id for the current context. Generates one if None."""
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


class FlushingRotatingFileHandler(RotatingFileHandler):
    """Flush after every record so log shippers see the latest line immediately."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


_STANDARD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "asctime", "taskName",
    }
)


class JsonLinesFormatter(logging.Formatter):
    """
    NDJSON formatter.

    Fields:
    - ts: UTC timestamp
    - level: log level
    - instance: instance identifier
    - rid: request id
    - event: event type (lifecycle, request, auth, timeline, share, public, db)
    - msg: message
    - ctx: extra context, sensitive keys removed
    - exc: exception text
    """

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        msecs = int(record.msecs) % 1000
        payload = {
            "ts": dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{msecs:03d}Z",
            "level": record.levelname,
            "instance": INSTANCE_ID,
        }

        rid = get_request_id()
        if rid:
            payload["rid"] = rid

        if getattr(record, "event", None):
            payload["event"] = record.event

        payload["msg"] = record.getMessage()

        skip = _STANDARD_ATTRS | {"event", "instance"}
        extra_ctx = {
            k: v for k, v in record.__dict__.items()
            if k not in skip
            and k not in _SENSITIVE_FIELDS
            and v is not None
        }
        if extra_ctx:
            payload["ctx"] = extra_ctx

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """
    Configure the root logger.

    - stdout: text format, INFO and above
    - stderr: ERROR and above
    - <log_dir>/app.log: INFO and above, NDJSON
    - <log_dir>/error.log: ERROR and above, NDJSON
    - noisy third-party loggers raised to WARNING
    """
    settings = get_settings()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    root_logger.handlers.clear()

    text_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.INFO)
    stdout_handler.setFormatter(text_formatter)
    root_logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(text_formatter)
    root_logger.addHandler(stderr_handler)

    log_dir = (settings.log_dir or "").strip()
    if log_dir:
        json_formatter = JsonLinesFormatter()
        try:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)

            file_handler = FlushingRotatingFileHandler(
                path / "app.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(json_formatter)
            root_logger.addHandler(file_handler)

            error_handler = FlushingRotatingFileHandler(
                path / "error.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(json_formatter)
            root_logger.addHandler(error_handler)
        except OSError as e:
            root_logger.warning("File logging disabled: %s", e)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)

    # Slow queries are reported separately on timeline_api.db
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def _log(level: int, message: str, exc_info: bool = False, **extra: Any) -> None:
    logger.log(level, message, exc_info=exc_info, extra=extra)


def log_info(message: str, **extra: Any) -> None:
    """Log an info message with structured extras."""
    _log(logging.INFO, message, **extra)


def log_warning(message: str, **extra: Any) -> None:
    """Log a warning message with structured extras."""
    _log(logging.WARNING, message, **extra)


def log_error(message: str, exc_info: bool = False, **extra: Any) -> None:
    """Log an error message with structured extras."""
    _log(logging.ERROR, message, exc_info=exc_info, **extra)
