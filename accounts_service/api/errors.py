"""Exception handlers that give every error response a ``{"message": ...}`` body.

  request validation failure   → 400
  HTTPException                → its own status (401 from the bearer guard)
  InfrastructureError          → 500, details logged but not returned
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts_service.core.errors import DomainError, InfrastructureError

logger = logging.getLogger(__name__)


def domain_error_response(error: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": error.message},
    )


def _describe(error: dict) -> str:
    # loc looks like ("body", "email"); the "body" prefix is noise to clients
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    msg = str(error.get("msg", "invalid value")).removeprefix("Value error, ")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def _validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = "; ".join(_describe(e) for e in exc.errors()) or "Invalid request"
    logger.info("Rejected request body: %s", message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _infrastructure_handler(
    request: Request, exc: InfrastructureError
) -> JSONResponse:
    logger.error(
        "Infrastructure failure on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(InfrastructureError, _infrastructure_handler)
