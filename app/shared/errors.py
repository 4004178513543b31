"""
Error taxonomy and standardized error responses for the analysis service.

Two kinds of failure live here:

- Exceptions raised by the pipeline (``AnalysisError`` and its subclasses).
  External-service and malformed-payload errors are recovered inside the
  inference client; validation and persistence errors reach the API layer.
- Helpers that turn those exceptions into JSON responses with a flat
  ``{"error": "<message>"}`` body, which is what browser callers read.

Usage:
    from app.shared.errors import PersistenceFailure, error_response_for

    try:
        ...
    except AnalysisError as exc:
        return error_response_for(exc, correlation_id=request.state.correlation_id)
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel
from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorCode(str, Enum):
    """Error codes used across the analysis service."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    DATABASE_ERROR = "DATABASE_ERROR"


# =============================================================================
# PIPELINE EXCEPTIONS
# =============================================================================

class AnalysisError(Exception):
    """Base class for journal analysis failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ExternalServiceUnavailable(AnalysisError):
    """A classifier call failed at the transport level or returned non-2xx."""

    code = ErrorCode.EXTERNAL_SERVICE_ERROR
    status_code = 502

    def __init__(self, service_name: str, message: str):
        super().__init__(message, details={"service": service_name})
        self.service_name = service_name


class MalformedResponse(AnalysisError):
    """A classifier payload did not match any recognized shape."""

    code = ErrorCode.MALFORMED_RESPONSE
    status_code = 502

    def __init__(self, service_name: str, message: str):
        super().__init__(message, details={"service": service_name})
        self.service_name = service_name


class PersistenceFailure(AnalysisError):
    """The analysis write to the journal record failed."""

    code = ErrorCode.DATABASE_ERROR
    status_code = 500

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, details={"operation": operation} if operation else None)
        self.operation = operation


class InputValidationFailure(AnalysisError):
    """Entry text or journal id is missing; rejected before any external call."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class MissingCallerIdentity(AnalysisError):
    """The request carried no bearer token to scope the write with."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


# =============================================================================
# RESPONSE HELPERS
# =============================================================================

class ErrorBody(BaseModel):
    """Flat error body returned to callers."""
    error: str
    code: str
    details: Optional[dict[str, Any]] = None
    correlation_id: Optional[str] = None


def get_correlation_id(request: Optional[Request] = None) -> Optional[str]:
    """Extract the correlation ID from request state, if any."""
    if request is None:
        return None
    return getattr(request.state, "correlation_id", None)


def error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a JSON error response.

    Args:
        code: Error code from ErrorCode enum
        message: Human-readable error message (becomes the ``error`` field)
        status_code: HTTP status code
        details: Optional additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with ``{"error": message, "code": ...}`` body
    """
    body = ErrorBody(
        error=message,
        code=code.value,
        details=details,
        correlation_id=correlation_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


def error_response_for(
    exc: AnalysisError,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """Build the response for a pipeline exception from its code and status."""
    return error_response(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=correlation_id,
    )


def internal_error(
    message: str = "Internal server error",
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """Create a 500 response for unexpected failures."""
    return error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message=message,
        status_code=500,
        correlation_id=correlation_id,
    )
