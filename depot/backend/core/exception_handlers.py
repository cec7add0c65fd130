"""
Error responses for the ledger API.

Every failure leaves the service in the ErrorResponse envelope:

    ApplicationError subclasses   status from EXCEPTION_STATUS_MAP (500 if unmapped)
    request shape errors          422 VAL_REQUEST_INVALID
    anything else                 500 SYS_INTERNAL_ERROR, details only in the log
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from depot.backend.core.exceptions import (
    ApplicationError,
    StoreUnavailableError,
    ValidationError,
)
from depot.backend.core.logging import get_logger
from depot.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    ValidationError: 400,
    StoreUnavailableError: 503,
}


def _get_request_id(request: Request) -> str | None:
    # Set by RequestContextMiddleware; the header covers apps built without it
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _error_response(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request failed",
        extra={
            "code": exc.code,
            "error": exc.message,
            "status": status_code,
            "path": request.url.path,
        },
    )

    details = exc.details if isinstance(exc, ValidationError) and exc.details else None
    return _error_response(
        request,
        status_code,
        ErrorDetail(code=exc.code, message=exc.message, details=details),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in exc.errors()
    ]
    logger.warning(
        "Request rejected",
        extra={"path": request.url.path, "fields": [e["field"] for e in field_errors]},
    )
    return _error_response(
        request,
        422,
        ErrorDetail(
            code="VAL_REQUEST_INVALID",
            message="Request validation failed",
            details={"validation_errors": field_errors},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "exception_type": type(exc).__name__},
    )
    return _error_response(
        request,
        500,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
