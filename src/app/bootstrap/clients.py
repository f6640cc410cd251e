"""Factories de clientes externos: Redis e HTTP.

Clientes são criados uma vez no composition root e fechados no shutdown.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

    from config.settings import ExternalAPISettings, MessagingSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Redis Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_async_redis_client(settings: MessagingSettings) -> AsyncRedis:
    """Cria cliente Redis assíncrono para o stream de eventos.

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    from redis.asyncio import Redis as AsyncRedis

    if not settings.redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("async_redis_client_created", extra={"host": host})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# HTTP Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_http_client(settings: ExternalAPISettings) -> httpx.AsyncClient:
    """Cria cliente httpx para o colaborador externo."""
    headers = {"Accept": "application/json", **settings.headers}
    if settings.api_key:
        headers["Authorization"] = f"Bearer {settings.api_key}"

    client = httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
        headers=headers,
    )
    logger.info("http_client_created", extra={"base_url": settings.base_url})
    return client
