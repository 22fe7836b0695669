"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). The single place where
internal failure kinds become an HTTP status plus the response envelope
{success: false, data: null, message}. Internal detail never crosses it.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crudkit.core.config import get_settings
from crudkit.core.constants import (
    MESSAGE_INTERNAL_ERROR,
    MESSAGE_NOT_FOUND,
    MESSAGE_PERSISTENCE_FAILURE,
    MESSAGE_VALIDATION_FAILED,
)
from crudkit.domain.exceptions import (
    BusinessRuleException,
    CrudKitException,
    PersistenceException,
    ResourceNotFoundException,
    ValidationException,
)
from crudkit.schemas.response import ApiResponse

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse[Any].fail(message).model_dump(),
    )


def _business_rule_handler(request: Request, exc: BusinessRuleException) -> JSONResponse:
    """Caller-facing rule violation: status chosen by the service, message passed through."""
    logger.info("Business rule violated on %s %s: %s", request.method, request.url.path, exc.message)
    return _envelope(exc.status_code, exc.message)


def _not_found_handler(request: Request, exc: ResourceNotFoundException) -> JSONResponse:
    logger.info("%s (%s %s)", exc.message, request.method, request.url.path)
    return _envelope(404, MESSAGE_NOT_FOUND)


def _validation_handler(request: Request, exc: ValidationException) -> JSONResponse:
    return _envelope(400, exc.message)


def _persistence_handler(request: Request, exc: PersistenceException) -> JSONResponse:
    """Log with full context (cause chained); answer with a sanitized message."""
    logger.error(
        "Persistence failure on %s %s: %s (details=%s)",
        request.method,
        request.url.path,
        exc.message,
        exc.details,
        exc_info=exc,
    )
    return _envelope(500, MESSAGE_PERSISTENCE_FAILURE)


def _crudkit_exception_handler(request: Request, exc: CrudKitException) -> JSONResponse:
    """Any other domain exception: 400 with its message."""
    logger.warning("Unmapped %s: %s", exc.error_code, exc.message)
    return _envelope(400, exc.message)


def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 naming the first invalid field."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = MESSAGE_VALIDATION_FAILED
    return _envelope(422, message)


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Starlette HTTP exceptions keep their status (e.g. 404 for unknown routes, 405)."""
    return _envelope(exc.status_code, str(exc.detail))


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled fault: log with stack, return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    message = str(exc) if settings.debug else MESSAGE_INTERNAL_ERROR
    return _envelope(500, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Starlette picks the handler for the most specific class in the MRO,
    so the subclasses win over CrudKitException and Exception.
    """
    app.add_exception_handler(BusinessRuleException, _business_rule_handler)
    app.add_exception_handler(ResourceNotFoundException, _not_found_handler)
    app.add_exception_handler(ValidationException, _validation_handler)
    app.add_exception_handler(PersistenceException, _persistence_handler)
    app.add_exception_handler(CrudKitException, _crudkit_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
