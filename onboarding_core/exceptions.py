"""
Consolidated exception system with error codes, context, and correlation support.

This module provides the exception hierarchy for the onboarding core,
with automatic logging and correlation ID tracking.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .constants import CallbackErrorKind, FieldCheckError

_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONFIGURATION_ERROR = "1003"

    # Validation errors (2xxx)
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"
    BIND_FAILED = "2005"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"

    # Business logic errors (4xxx)
    UNSUPPORTED_TYPE = "4005"

    # External service errors (5xxx)
    EXTERNAL_API_ERROR = "5002"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP-style status code classifying the error
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(message)

    def _log_error(self) -> None:
        """Log error with appropriate level based on status code."""
        # Imported here: the logger module depends on config, which must not import exceptions
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "timestamp": self.timestamp,
            "context": {k: v for k, v in self.context.items() if k not in ["cause", "traceback"]},
        }

        if "correlation_id" in self.context:
            log_data["correlation_id"] = self.context["correlation_id"]

        if self.status_code >= 500:
            logger.error(f"Error {self.error_code.value}: {self.message}", extra=log_data)
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code.value}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code.value}: {self.message}", extra=log_data)

    def to_dict(
        self, include_cause: bool = False, include_traceback: bool = False
    ) -> Dict[str, Any]:
        """
        Convert to dict for API responses.

        Args:
            include_cause: Include cause information (useful for debugging)
            include_traceback: Include full traceback (only in debug mode)

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        result: Dict[str, Any] = {
            "error": {
                "id": self.error_id,
                "code": self.error_code.value,
                "message": self.message,
                "timestamp": self.timestamp,
                "context": {
                    k: v
                    for k, v in self.context.items()
                    if k not in ["cause", "error_id", "correlation_id"]
                },
            }
        }

        if "correlation_id" in self.context:
            result["error"]["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["error"]["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }
            if include_traceback:
                result["error"]["cause"]["traceback"] = self.context["cause"]["traceback"]

        return result


# Layer-specific base exceptions
class RepositoryError(BaseError):
    """Persistence layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context,
    ):
        super().__init__(message, error_code, status_code, cause, **context)


class ServiceError(BaseError):
    """Service layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if operation:
            context["operation"] = operation
        super().__init__(message, error_code, 500, cause, **context)


class ValidationError(BaseError):
    """A field value was empty or did not match its allowed character class."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        kind: FieldCheckError = FieldCheckError.INVALID_FORMAT,
        error_code: Optional[ErrorCode] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if field:
            context["field"] = field
        context["kind"] = kind.value
        self.kind = kind
        if error_code is None:
            error_code = (
                ErrorCode.MISSING_REQUIRED
                if kind == FieldCheckError.EMPTY
                else ErrorCode.INVALID_FORMAT
            )
        super().__init__(message, error_code, 400, cause, **context)


class ConfigurationError(BaseError):
    """A configuration submission was rejected as a whole."""

    kind = "bind-failed"

    def __init__(self, message: str, cause: Optional[Exception] = None, **context):
        context["kind"] = self.kind
        super().__init__(message, ErrorCode.BIND_FAILED, 400, cause, **context)


class CallbackError(BaseError):
    """An outbound callback could not be made or was not accepted."""

    def __init__(
        self,
        message: str,
        kind: CallbackErrorKind,
        status_code_received: Optional[int] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        self.kind = kind
        self.status_code_received = status_code_received
        context["kind"] = kind.value
        if status_code_received is not None:
            context["status_code_received"] = status_code_received

        if kind in (CallbackErrorKind.HTTP_STATUS, CallbackErrorKind.TRANSPORT_FAILURE):
            error_code, status_code = ErrorCode.EXTERNAL_API_ERROR, 502
        elif kind == CallbackErrorKind.CREDENTIAL_NOT_FOUND:
            error_code, status_code = ErrorCode.NOT_FOUND, 404
        elif kind == CallbackErrorKind.UNSUPPORTED_CREDENTIAL_TYPE:
            error_code, status_code = ErrorCode.UNSUPPORTED_TYPE, 400
        else:
            error_code, status_code = ErrorCode.MISSING_REQUIRED, 400
        super().__init__(message, error_code, status_code, cause, **context)


class NotFoundError(RepositoryError):
    """A requested resource does not exist."""

    def __init__(self, message: str = "Resource not found", **kwargs):
        super().__init__(message, error_code=ErrorCode.NOT_FOUND, status_code=404, **kwargs)


class EntryNotFoundError(NotFoundError):
    """Raised when a registry entry id is unknown."""


class CredentialNotFoundError(NotFoundError):
    """Raised when a requested credential is not found."""


class StepNotFoundError(NotFoundError):
    """Raised when no step is registered under a name."""


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
