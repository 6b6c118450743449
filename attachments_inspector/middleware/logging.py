"""
Request logging.

One access line per request, tagged with a request ID that is echoed back in
the ``X-Request-ID`` response header and attached to every log record emitted
while the request is being served.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

ACCESS_LOGGER = "attachments_inspector.access"
REQUEST_ID_HEADER = "X-Request-ID"

# Paths polled by load balancers; logging them only adds noise
QUIET_PATHS = frozenset({"/health"})

# Record attributes copied into the JSON line when present
EXTRA_FIELDS = ("method", "path", "status_code", "duration_ms", "client_ip", "error_code")


def get_request_id() -> str:
    return request_id_var.get("")


class RequestIdFilter(logging.Filter):
    """Stamp records with the ID of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class StructuredFormatter(logging.Formatter):
    """Render records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        entry.update({key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def client_address(request: Request) -> str:
    """First hop of X-Forwarded-For, else X-Real-IP, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if "X-Real-IP" in request.headers:
        return request.headers["X-Real-IP"]
    return request.client.host if request.client else "unknown"


def level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    return logging.WARNING if status_code >= 400 else logging.INFO


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger_name: str = ACCESS_LOGGER):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            self._access(request, 500, started, request_id=request_id, error=str(exc))
            raise
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        self._access(request, response.status_code, started, request_id=request_id)
        return response

    def _access(
        self, request: Request, status_code: int, started: float, request_id: str = "", error: str | None = None
    ) -> None:
        if request.url.path in QUIET_PATHS:
            return

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        message = f"{request.method} {request.url.path} -> {status_code} in {duration_ms}ms"
        if error:
            message = f"{message} ({error})"

        self.logger.log(
            level_for(status_code),
            message,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "client_ip": client_address(request),
            },
        )


def setup_structured_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        log_level: Level for the application and access loggers
        json_format: JSON lines when true, a plain text layout otherwise
    """
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(
        StructuredFormatter()
        if json_format
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s")
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level.upper())

    for name in ("attachments_inspector", ACCESS_LOGGER):
        logging.getLogger(name).setLevel(log_level.upper())
    for name in ("uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)
