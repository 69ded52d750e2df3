"""
Error responses.

Clients of this API expect error bodies to be a bare JSON string holding
the message, not FastAPI's ``{"detail": ...}`` envelope. Validation
failures are reported as 400 rather than 422.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        message = error.get("msg", "invalid request")
        if error.get("type") == "json_invalid":
            # loc holds the byte offset of the parse failure here
            detail = (error.get("ctx") or {}).get("error")
            messages.append(f"{message}: {detail}" if detail else message)
            continue
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part != "body"
        )
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "invalid request body"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _describe_validation_error(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content=message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
