"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from core.exceptions import (
    CatalogUnavailableError,
    DraftStateError,
    DraftSubmittedError,
    InvalidPricingInputError,
    InvalidStatusTransitionError,
)

logger = logging.getLogger(__name__)


def _error(request: Request, status_code: int, code: str, message: str, retryable: bool = False) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, request, retryable).model_dump(mode="json"),
    )


def _format_validation_errors(errors: list[dict]) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the app.

    Handlers are matched on the exception's class hierarchy, so the domain
    errors below win over the generic ValueError handler they inherit from.
    """

    @app.exception_handler(CatalogUnavailableError)
    async def catalog_unavailable_handler(request: Request, exc: CatalogUnavailableError):
        logger.warning(f"Catalog unavailable for {request.url.path}: {exc}")
        return _error(
            request, 503, ErrorCodes.SERVICE_UNAVAILABLE,
            "Pricing is temporarily unavailable, please try again",
            retryable=exc.retryable,
        )

    @app.exception_handler(InvalidPricingInputError)
    async def invalid_pricing_input_handler(request: Request, exc: InvalidPricingInputError):
        return _error(request, 400, ErrorCodes.INVALID_PRICING_INPUT, str(exc))

    @app.exception_handler(DraftSubmittedError)
    async def draft_submitted_handler(request: Request, exc: DraftSubmittedError):
        return _error(request, 409, ErrorCodes.DRAFT_ALREADY_SUBMITTED, str(exc))

    @app.exception_handler(DraftStateError)
    async def draft_state_handler(request: Request, exc: DraftStateError):
        return _error(request, 409, ErrorCodes.DRAFT_STATE_ERROR, str(exc))

    @app.exception_handler(InvalidStatusTransitionError)
    async def status_transition_handler(request: Request, exc: InvalidStatusTransitionError):
        return _error(request, 409, ErrorCodes.INVALID_STATUS_TRANSITION, str(exc))

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return _error(
            request, 422, ErrorCodes.VALIDATION_ERROR,
            _format_validation_errors(exc.errors(include_url=False)),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return _error(request, 404, ErrorCodes.NOT_FOUND, message)
        return _error(request, 400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(
            request, 422, ErrorCodes.VALIDATION_ERROR,
            _format_validation_errors(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _error(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
