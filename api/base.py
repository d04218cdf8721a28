"""Unified API response format and error codes."""

from typing import Any
from datetime import datetime
from uuid import uuid4

from fastapi import Request
from pydantic import BaseModel, Field

from utils.dates import now_utc


class APIError(BaseModel):
    """Error details in API response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    retryable: bool = Field(False, description="Whether the same request may succeed later")


class APIMeta(BaseModel):
    """Metadata included in every API response."""

    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., description="Unique request identifier for tracing")


class APIResponse(BaseModel):
    """
    Unified response format for all API endpoints.

    Every endpoint returns this structure, making client parsing predictable.
    """

    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta


def _request_id(request: Request | None) -> str:
    # Set by RequestIDMiddleware; fall back for handlers mounted without it
    if request is not None:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            return request_id
    return str(uuid4())


def success_response(data: Any, request: Request | None = None) -> APIResponse:
    """Create a success response."""
    return APIResponse(
        success=True,
        data=data,
        error=None,
        meta=APIMeta(
            timestamp=now_utc(),
            request_id=_request_id(request),
        ),
    )


def error_response(
    code: str,
    message: str,
    request: Request | None = None,
    retryable: bool = False,
) -> APIResponse:
    """Create an error response."""
    return APIResponse(
        success=False,
        data=None,
        error=APIError(code=code, message=message, retryable=retryable),
        meta=APIMeta(
            timestamp=now_utc(),
            request_id=_request_id(request),
        ),
    )


class ErrorCodes:
    """Standard error codes for consistent error handling."""

    # Resource Errors
    NOT_FOUND = "NOT_FOUND"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_PRICING_INPUT = "INVALID_PRICING_INPUT"

    # Draft Lifecycle
    DRAFT_STATE_ERROR = "DRAFT_STATE_ERROR"
    DRAFT_ALREADY_SUBMITTED = "DRAFT_ALREADY_SUBMITTED"

    # Booking Lifecycle
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"

    # Infrastructure
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
