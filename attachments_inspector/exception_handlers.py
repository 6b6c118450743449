"""
Global exception handlers.

Every failure leaves the service in one envelope:

    {"error": {"status_code": 403, "error_code": "AUTH_PERMISSION_DENIED",
               "message": "...", "type": "Forbidden",
               "details": {"required_permission": "edit_posts"},
               "path": "/prc-api/v3/attachments-panel/get/12"}}

``details`` and ``path`` are omitted when empty.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from attachments_inspector.exceptions import ErrorCode, InspectorError

logger = logging.getLogger(__name__)

# Statuses this service can answer with: (type label, error code for bare HTTPExceptions)
STATUS_LABELS: dict[int, tuple[str, ErrorCode]] = {
    401: ("Unauthorized", ErrorCode.AUTH_FAILED),
    403: ("Forbidden", ErrorCode.AUTH_PERMISSION_DENIED),
    404: ("Not Found", ErrorCode.RESOURCE_NOT_FOUND),
    405: ("Method Not Allowed", ErrorCode.VALIDATION_FAILED),
    422: ("Validation Error", ErrorCode.VALIDATION_FAILED),
    500: ("Internal Server Error", ErrorCode.INTERNAL_ERROR),
}


def get_error_type(status_code: int) -> str:
    label = STATUS_LABELS.get(status_code)
    return label[0] if label else "Error"


def get_http_error_code(status_code: int) -> str:
    label = STATUS_LABELS.get(status_code)
    return (label[1] if label else ErrorCode.UNKNOWN_ERROR).value


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the error envelope, dropping empty optional fields."""
    body: dict[str, Any] = {"status_code": status_code, "message": message, "type": get_error_type(status_code)}
    if error_code:
        body["error_code"] = ErrorCode(error_code).value
    if details:
        body["details"] = details
    if path:
        body["path"] = path
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


async def inspector_exception_handler(request: Request, exc: InspectorError) -> JSONResponse:
    logger.warning(
        "%s on %s: %s",
        exc.error_code.value,
        request.url.path,
        exc.message,
        extra={"status_code": exc.status_code, "error_code": exc.error_code.value, "path": request.url.path},
    )
    # Bearer challenge for missing or bad credentials
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return create_error_response(
        exc.status_code, exc.message, exc.error_code, exc.details or None, request.url.path, headers
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) and any stray HTTPException."""
    logger.warning("HTTP %s on %s", exc.status_code, request.url.path, extra={"status_code": exc.status_code})
    return create_error_response(
        exc.status_code,
        str(exc.detail),
        get_http_error_code(exc.status_code),
        path=request.url.path,
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Only path parameters can fail here; query arguments fall back to defaults instead."""
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning("Validation error on %s", request.url.path, extra={"errors": errors})
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        ErrorCode.VALIDATION_FAILED,
        {"validation_errors": errors},
        request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InspectorError, inspector_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
