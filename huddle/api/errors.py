"""Translate domain errors into JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from huddle.errors import DecodeError, WriteError

logger = logging.getLogger(__name__)


async def _decode_error_handler(request: Request, exc: DecodeError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


async def _write_error_handler(request: Request, exc: WriteError) -> JSONResponse:
    logger.error("Write failed path=%s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DecodeError, _decode_error_handler)
    app.add_exception_handler(WriteError, _write_error_handler)
