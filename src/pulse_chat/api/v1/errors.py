"""Translation of exceptions into JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pulse_chat.services.errors import ChatError

logger = logging.getLogger(__name__)

_LOCATION_ROOTS = {"body", "query", "path", "cookie", "header"}


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    """Map a domain error to its status code and user-facing message."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first schema violation as a 400."""
    errors = exc.errors()
    first = errors[0] if errors else {"loc": (), "msg": "Invalid request"}
    location = [str(part) for part in first.get("loc", ()) if part not in _LOCATION_ROOTS]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": first.get("msg", "Invalid request"), "field": ".".join(location) or None},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Hide unexpected failures behind a generic message."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``."""
    app.add_exception_handler(ChatError, chat_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unexpected_error_handler)
