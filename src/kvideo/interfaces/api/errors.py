"""Domain error -> HTTP response mapping shared by the API routers."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kvideo.domain.entities.errors import (
    ClientInputError,
    NoPlayableContentError,
    UpstreamSourceError,
)
from kvideo.interfaces.api.presenter import present_error
from kvideo.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _is_prod(state: AppState) -> bool:
    return state.config.environment == "prod"


def error_response(
    state: AppState, exc: Exception, *, event: str, **context: object
) -> JSONResponse:
    """Map *exc* to a JSON error response and log it.

    ClientInputError -> 400, NoPlayableContentError -> 404,
    UpstreamSourceError -> 500 with the upstream message, anything else
    -> 500 (message hidden in prod).
    """
    if isinstance(exc, ClientInputError):
        log.info(f"{event}_bad_request", error=str(exc), **context)
        return JSONResponse(present_error(str(exc)), status_code=400)

    if isinstance(exc, NoPlayableContentError):
        log.info(f"{event}_not_found", error=str(exc), **context)
        return JSONResponse(present_error(str(exc)), status_code=404)

    if isinstance(exc, UpstreamSourceError):
        # Routers pass their own ``source`` in context
        log.warning(
            f"{event}_upstream_error",
            error=str(exc),
            upstream_source=exc.source_id,
            **context,
        )
        return JSONResponse(present_error(str(exc)), status_code=500)

    log.exception(f"{event}_unhandled_error", **context)
    message = "Internal server error" if _is_prod(state) else str(exc)
    return JSONResponse(present_error(message or "Internal server error"), status_code=500)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # Drop the "query"/"body" location prefix
    loc = [str(part) for part in first.get("loc", ())[1:]]
    field = ".".join(loc)
    msg = first.get("msg", "invalid value")
    return f"Invalid request: {field}: {msg}" if field else f"Invalid request: {msg}"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed query strings and bodies get the standard 400 envelope."""
    message = _describe_validation_error(exc)
    log.info(
        "request_validation_failed",
        method=request.method,
        path=request.url.path,
        error=message,
    )
    return JSONResponse(present_error(message), status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
