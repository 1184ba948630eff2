"""Custom exception classes and error handling for the leapscan API."""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from ..config.logging import get_logger
from ..core.exceptions import InvalidInputError
from .models.responses import ErrorResponse

logger = get_logger(__name__)


class LeapscanAPIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.request_id = request_id


class ValidationException(LeapscanAPIException):
    """Exception for validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, str]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=422,
            details={"field_errors": field_errors or {}},
            request_id=request_id,
        )


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    error: Dict[str, Any] = {
        "type": error_type,
        "message": message,
        "status_code": status_code,
    }
    if details:
        error["details"] = details

    body = ErrorResponse(success=False, error=error, request_id=_request_id(request))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )


async def api_exception_handler(
    request: Request, exc: LeapscanAPIException
) -> JSONResponse:
    """Handle API exceptions."""
    logger.error(
        "API exception occurred",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=_request_id(request),
        path=request.url.path,
        method=request.method,
    )
    return _error_response(
        request, exc.status_code, type(exc).__name__, exc.message, exc.details
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle pydantic and FastAPI request validation errors."""
    field_errors = {}
    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        field_errors[field_path] = error["msg"]

    logger.warning(
        "Validation error occurred",
        field_errors=field_errors,
        request_id=_request_id(request),
        path=request.url.path,
        method=request.method,
    )
    return _error_response(
        request,
        422,
        "ValidationError",
        "Request validation failed",
        {"field_errors": field_errors},
    )


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    """Handle pricing inputs rejected by the core."""
    logger.warning(
        "Invalid input rejected",
        field=exc.field,
        value=repr(exc.value),
        request_id=_request_id(request),
        path=request.url.path,
    )
    return _error_response(
        request,
        422,
        "InvalidInput",
        exc.message,
        {"field_errors": {exc.field: exc.message}},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions."""
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=_request_id(request),
        path=request.url.path,
        method=request.method,
    )
    return _error_response(request, exc.status_code, "HTTPException", str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "Unexpected exception occurred",
        exception_type=type(exc).__name__,
        message=str(exc),
        request_id=_request_id(request),
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )

    # Internal details stay in the logs
    return _error_response(
        request, 500, "InternalServerError", "An unexpected error occurred"
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""
    app.add_exception_handler(LeapscanAPIException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.debug("Exception handlers registered")
