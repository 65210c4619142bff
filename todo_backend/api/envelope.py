"""Uniform success/error response envelope.

Every response body is either ``{"success": true, <key>: value}`` or
``{"success": false, "error": "..."}``. The exception handlers installed by
``install_exception_handlers`` make sure typed errors, request validation
failures and unexpected exceptions all come back in that shape.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import TodoError
from ..logging_utils import get_request_id

logger = logging.getLogger(__name__)


def success(key: str, value: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, key: jsonable_encoder(value)},
    )


def failure(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
    )


def describe_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Turn pydantic error entries into a single client-facing message."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    error_type = error.get("type", "")
    loc = tuple(error.get("loc", ()))
    if error_type == "json_invalid" or loc == ("body",):
        return "Invalid JSON payload"
    source = loc[0] if loc else "body"
    field = str(loc[-1]) if len(loc) > 1 else source
    kind = "query parameter" if source == "query" else "field"
    if error_type == "missing":
        return f"Missing '{field}' {kind}"
    return f"Invalid '{field}' {kind}: {error.get('msg', 'invalid value')}"


async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed (request_id=%s): %s",
            request.method,
            request.url.path,
            get_request_id() or "-",
            exc.message,
        )
    return failure(exc.message, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return failure(describe_validation_errors(exc.errors()), status.HTTP_400_BAD_REQUEST)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = failure(message, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # ServerErrorMiddleware re-raises after this response, so the server logs the traceback
    logger.error(
        "Unhandled error in %s %s: %r",
        request.method,
        request.url.path,
        exc,
    )
    return failure("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoError, todo_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
