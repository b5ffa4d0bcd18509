"""
Global exception handlers.

Every error leaves the API as a JSON envelope of the form
``{"success": false, "message": ...}``.  Request validation failures
are reported as HTTP 400 with an ``errors`` list of
``{field, message, location}`` items.
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed"
ROUTE_NOT_FOUND = "Route not found"
SERVER_ERROR = "Something went wrong!"


def error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def format_validation_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """Flatten pydantic errors into ``{field, message, location}`` dicts.

    Messages raised from our own validators are reported verbatim,
    without pydantic's ``"Value error, "`` prefix.
    """
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else ""
        field = ".".join(loc[1:]) if len(loc) > 1 else location
        cause = (err.get("ctx") or {}).get("error")
        message = str(cause) if cause is not None else err.get("msg", "Invalid value")
        errors.append({"field": field, "message": message, "location": location})
    return errors


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = ROUTE_NOT_FOUND
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, message)
    response = error_response(exc.status_code, str(message))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc)
    logger.warning("%s %s -> 400: %d validation error(s)", request.method, request.url.path, len(errors))
    return error_response(status.HTTP_400_BAD_REQUEST, VALIDATION_FAILED, errors=errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope‑producing handlers to ``app``."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
