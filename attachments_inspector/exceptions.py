"""
Custom Exception Classes for the Attachments Inspector

Every error carries a machine-readable ErrorCode so the editor UI can map
responses to messages without parsing text.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes included in error responses."""

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
    AUTH_TOKEN_INVALID = "AUTH_TOKEN_INVALID"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_POST_NOT_FOUND = "RESOURCE_POST_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    ASSET_REGISTRATION_FAILED = "ASSET_REGISTRATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class InspectorError(Exception):
    """Base exception class for all inspector exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(InspectorError):
    """Raised when authentication fails"""

    error_code = ErrorCode.AUTH_FAILED

    def __init__(self, message: str = "Authentication failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired"""

    error_code = ErrorCode.AUTH_TOKEN_EXPIRED

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message=message)


class InvalidTokenError(AuthenticationError):
    """Raised when JWT token is invalid"""

    error_code = ErrorCode.AUTH_TOKEN_INVALID

    def __init__(self, message: str = "Invalid or malformed token"):
        super().__init__(message=message)


class AuthorizationError(InspectorError):
    """Raised when user lacks permission for an action"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(
        self, message: str = "You do not have permission to perform this action", required_permission: str | None = None
    ):
        details = {"required_permission": required_permission} if required_permission else {}
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(InspectorError):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class PostNotFoundError(ResourceNotFoundError):
    """Raised when a post is not found"""

    error_code = ErrorCode.RESOURCE_POST_NOT_FOUND

    def __init__(self, post_id: Any | None = None):
        super().__init__(resource_type="Post", resource_id=post_id)


# ============================================================================
# Asset Exceptions
# ============================================================================


class AssetRegistrationError(InspectorError):
    """
    Tagged error value for a failed asset registration.

    Returned (not raised) by AssetRegistry.register_bundle so callers can
    skip enqueueing and keep rendering the page.
    """

    error_code = ErrorCode.ASSET_REGISTRATION_FAILED

    def __init__(self, handle: str, message: str = "Failed to register all assets"):
        self.handle = handle
        super().__init__(message=message, details={"handle": handle})


def is_error(value: Any) -> bool:
    """Return True if ``value`` is a returned (not raised) inspector error."""
    return isinstance(value, InspectorError)
