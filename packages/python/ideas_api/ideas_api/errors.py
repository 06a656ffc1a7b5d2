"""Map domain errors from ``ideas_repo`` onto HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from ideas_repo import (
    CommentNotFoundError,
    IdeaNotFoundError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    PermissionDeniedError,
)

STATUS_CODES = {
    IdeaNotFoundError: 404,
    CommentNotFoundError: 404,
    PermissionDeniedError: 403,
    InvalidStatusError: 400,
    InvalidStatusTransitionError: 409,
}


async def _domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = STATUS_CODES.get(type(exc), 400)
    logger.info(
        "{method} {path} -> {status}: {error}",
        method=request.method,
        path=request.url.path,
        status=status_code,
        error=exc,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def install_exception_handlers(app: FastAPI) -> None:
    for error_type in STATUS_CODES:
        app.add_exception_handler(error_type, _domain_error_handler)
