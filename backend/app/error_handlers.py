"""
Exception handlers for the CRM API.

Every error response has the shape ``{"detail": ..., "status_code": ...}``.
Request ids are logged server-side but not returned in the body; clients
already receive them in the X-Request-ID header.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from core.logging import get_logger

logger = get_logger("backend.errors")


def _request_id() -> str:
    return structlog.contextvars.get_contextvars().get("request_id", "-")


def _payload(detail: str, status_code: int) -> dict:
    return {"detail": detail, "status_code": status_code}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            path=request.url.path,
            request_id=_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_payload(str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc):
        errors = jsonable_encoder(exc.errors())
        logger.warning(
            "validation_error",
            errors=errors,
            path=request.url.path,
            request_id=_request_id(),
        )
        return JSONResponse(
            status_code=422,
            content={**_payload("Validation error", 422), "errors": errors},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            request_id=_request_id(),
        )
        # Generic message: exception details stay in the logs
        return JSONResponse(
            status_code=500,
            content=_payload("Internal server error", 500),
        )
