"""Tradução de erros de aplicação para respostas HTTP.

Status derivado de `ErrorCategory` (nunca de texto da mensagem). Corpo:
    {"error": <categoria>, "message": <localizada>, "code": <ErrorCode>, "details": ...}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.errors import AppError, ErrorCategory, ErrorCode

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

    from app.infra.i18n import Localizer

logger = logging.getLogger(__name__)

STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.BUSINESS: 422,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.EXTERNAL: 502,
    ErrorCategory.UNAVAILABLE: 503,
    ErrorCategory.INTERNAL: 500,
}


def status_for(error: AppError) -> int:
    return STATUS_BY_CATEGORY.get(error.category, 500)


def _localizer(request: Request) -> Localizer | None:
    container = getattr(request.app.state, "container", None)
    return getattr(container, "localizer", None)


def _language(request: Request, localizer: Localizer) -> str:
    language = getattr(request.state, "language", "")
    if language:
        return language
    return localizer.parse_accept_language(request.headers.get("accept-language"))


def _render(
    request: Request,
    status_code: int,
    category: str,
    code: ErrorCode,
    message: str,
    details: Any = None,
    template_data: dict[str, Any] | None = None,
) -> JSONResponse:
    localizer = _localizer(request)
    if localizer is not None:
        message = localizer.localize(
            _language(request, localizer), str(code), template_data, fallback=message
        )
    body = {"error": category, "message": message, "code": str(code), "details": details}
    return JSONResponse(status_code=status_code, content=body)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": status_code,
            "error_code": str(exc.code),
            "error_type": type(exc).__name__,
        },
    )
    return _render(
        request,
        status_code,
        str(exc.category),
        exc.code,
        exc.message,
        exc.details,
        exc.template_data,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(
        "request_validation_failed",
        extra={"path": request.url.path, "method": request.method, "error_count": len(fields)},
    )
    return _render(
        request,
        400,
        str(ErrorCategory.VALIDATION),
        ErrorCode.VALIDATION_FAILED,
        "request validation failed",
        {"fields": fields},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request_unhandled_error",
        extra={"path": request.url.path, "method": request.method, "error_type": type(exc).__name__},
    )
    return _render(
        request,
        500,
        str(ErrorCategory.INTERNAL),
        ErrorCode.INTERNAL_ERROR,
        "internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
