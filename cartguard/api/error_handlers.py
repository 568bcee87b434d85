"""HTTP error mapping for the CartGuard API.

Every failure leaves the API as ``{"error": {...}}``:

    CartGuardError          -> its own http_status, body from to_response()
    RequestValidationError  -> 400, one ``details`` entry per bad field
    anything else           -> 500, no internals in the body

Schema problems inside a well-formed request are not errors here; the
routes return them as data with status 200.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cartguard.core.errors import CartGuardError, ErrorCategory, ErrorSeverity
from cartguard.schemas.parsing import location_path

logger = logging.getLogger(__name__)


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity, **extra,
) -> dict:
    return {"error": {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": severity.value,
        **extra,
    }}


def _field_details(exc: RequestValidationError) -> list[dict]:
    # loc ("body", "rule_catalog") becomes "body.rule_catalog"; union tags are dropped
    return [
        {
            "field": location_path(err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


async def handle_cartguard_error(request: Request, exc: CartGuardError) -> JSONResponse:
    level = logging.WARNING if exc.http_status < 500 else logging.ERROR
    logger.log(
        level, "%s rejected: %s", request.url.path, exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "document_key": exc.context.document_key,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = _field_details(exc)
    logger.warning(
        "Malformed request on %s (%d field errors)", request.url.path, len(details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    body = _envelope(
        "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled %s on %s", type(exc).__name__, request.url.path,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    body = _envelope(
        "INTERNAL_ERROR", "An unexpected error occurred",
        ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the handlers, most specific first."""
    app.add_exception_handler(CartGuardError, handle_cartguard_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
