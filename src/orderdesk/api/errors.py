"""
orderdesk.api.errors

Exception handlers mapping the error taxonomy onto HTTP responses.

Responsibilities:
- `AppError` subclasses -> their status with `{"error": <public message>}`.
- Request validation failures -> 400 (not FastAPI's default 422).
- Anything else -> 500 with a generic body; details stay in the logs.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from orderdesk.errors import AppError
from orderdesk.observability.logging import get_logger

log = get_logger(__name__)


async def _app_error(_: Request, exc: AppError) -> JSONResponse:
    log.warning("request.rejected", error=type(exc).__name__, reason=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    log.warning("request.invalid", details=details)
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": details},
    )


async def _unhandled(_: Request, exc: Exception) -> JSONResponse:
    log.error("request.failed", error=type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled)
