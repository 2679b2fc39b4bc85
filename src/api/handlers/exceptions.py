from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import BlogPostException, StoreError, map_exception_to_http
from schemas.responses import ErrorResponse

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, error: dict[str, Any]) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers."""

    @app.exception_handler(BlogPostException)
    async def blog_post_exception_handler(request: Request, exc: BlogPostException) -> JSONResponse:  # noqa: D401
        http_exc = map_exception_to_http(exc)
        log = logger.error if isinstance(exc, StoreError) else logger.info
        log("%s %s -> %s: %s", request.method, request.url.path, http_exc.status_code, exc.message)
        error: dict[str, Any] = {"type": exc.__class__.__name__, "code": exc.code}
        if exc.details:
            error["details"] = exc.details
        return error_response(http_exc.status_code, http_exc.detail, error)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
        logger.info("%s %s -> 400: invalid request", request.method, request.url.path)
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Request validation failed",
            {"type": "ValidationError", "code": "validation_error", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            {"type": exc.__class__.__name__, "code": "internal_error"},
        )
