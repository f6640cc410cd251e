"""Middleware HTTP de contexto de requisição.

Por requisição:
- correlation_id de `X-Correlation-ID`/`X-Request-ID` (gerado se ausente),
  devolvido em ambos os headers
- user_id de `X-User-ID` (default "system")
- idioma: `?lang`, `X-Language`, `Accept-Language`, default; devolvido em
  `Content-Language`
- métrica de latência por rota
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from app.observability import (
    generate_correlation_id,
    record_latency,
    reset_correlation_id,
    reset_language,
    reset_user_id,
    set_correlation_id,
    set_language,
    set_user_id,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import FastAPI, Request, Response

    from app.infra.i18n import Localizer


def _detect_language(request: Request, localizer: Localizer | None) -> str:
    if localizer is None:
        return ""
    for candidate in (request.query_params.get("lang"), request.headers.get("x-language")):
        if candidate and localizer.is_supported(candidate.lower()):
            return candidate.lower()
    return localizer.parse_accept_language(request.headers.get("accept-language"))


async def request_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    correlation_id = (
        request.headers.get("x-correlation-id")
        or request.headers.get("x-request-id")
        or generate_correlation_id()
    )
    container = getattr(request.app.state, "container", None)
    language = _detect_language(request, getattr(container, "localizer", None))
    request.state.language = language

    correlation_token = set_correlation_id(correlation_id)
    user_token = set_user_id(request.headers.get("x-user-id"))
    language_token = set_language(language)
    started_at = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        record_latency("http", f"{request.method} {path}", (time.perf_counter() - started_at) * 1000)
        reset_language(language_token)
        reset_user_id(user_token)
        reset_correlation_id(correlation_token)

    response.headers["X-Correlation-ID"] = correlation_id
    response.headers["X-Request-ID"] = correlation_id
    if language:
        response.headers["Content-Language"] = language
    return response


def register_middleware(app: FastAPI) -> None:
    app.middleware("http")(request_context_middleware)
