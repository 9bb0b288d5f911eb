# backend/salonbook/errors.py
"""
Error rendering.

Every error response has the body ``{"error": message, "code": code,
"details": {...}}``. Request validation failures are reported as 400.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)


def _title_from_status(status_code: int) -> str:
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        500: "INTERNAL_ERROR",
    }
    return mapping.get(status_code, "ERROR")


def _error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"error": message, "code": code, "details": jsonable_encoder(details or {})}


def _body_from_detail(status_code: int, detail: Any) -> Dict[str, Any]:
    if isinstance(detail, dict) and isinstance(detail.get("error"), str):
        return _error_body(
            detail["error"],
            detail.get("code") or _title_from_status(status_code),
            detail.get("details"),
        )
    message = detail if isinstance(detail, str) else str(detail or _title_from_status(status_code))
    return _error_body(message, _title_from_status(status_code))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(jsonable_encoder(exc.to_dict()), status_code=exc.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            _body_from_detail(exc.status_code, exc.detail),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            _body_from_detail(exc.status_code, exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "loc": list(error.get("loc", ())),
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            _error_body("Invalid request", "VALIDATION_ERROR", {"errors": errors}),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            _error_body("Internal server error", "INTERNAL_ERROR"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
