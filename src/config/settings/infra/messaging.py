"""Settings de mensageria (eventos de Example).

Backends:
- memory: publisher em processo que apenas registra eventos
- redis: Redis Streams (XADD / XREADGROUP)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

MessagingBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class MessagingSettings:
    """Configurações de publicação/consumo de eventos.

    Attributes:
        backend: Backend de eventos (memory|redis)
        redis_url: URL Redis (obrigatória para backend redis)
        stream_name: Stream onde os eventos são publicados
        routing_prefix: Prefixo da routing key (`<prefix>.<type>`)
        consumer_group: Grupo de consumidores
        consumer_name: Nome deste consumidor no grupo
        enable_producer: Publica eventos após mutações
        max_stream_length: MAXLEN aproximado do stream
        block_ms: Bloqueio do XREADGROUP
        batch_size: Mensagens por leitura
    """

    backend: MessagingBackend = "memory"
    redis_url: str = ""
    stream_name: str = "example-events"
    routing_prefix: str = "example"
    consumer_group: str = "example-consumers"
    consumer_name: str = "example-consumer-1"
    enable_producer: bool = True
    max_stream_length: int = 100_000
    block_ms: int = 1000
    batch_size: int = 10

    def validate(self) -> list[str]:
        """Valida configurações de mensageria."""
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"MQ_BACKEND inválido: {self.backend}")

        if self.backend == "redis" and not self.redis_url:
            errors.append("MQ_BACKEND=redis requer REDIS_URL configurado")

        if not self.stream_name:
            errors.append("MQ_STREAM_NAME não pode ser vazio")

        if self.batch_size <= 0:
            errors.append("MQ_BATCH_SIZE deve ser > 0")

        return errors


def _load_messaging_from_env() -> MessagingSettings:
    """Carrega MessagingSettings de variáveis de ambiente."""
    backend_str = os.getenv("MQ_BACKEND", "memory").lower()
    backend: MessagingBackend = "redis" if backend_str == "redis" else "memory"
    return MessagingSettings(
        backend=backend,
        redis_url=os.getenv("REDIS_URL", ""),
        stream_name=os.getenv("MQ_STREAM_NAME", "example-events"),
        routing_prefix=os.getenv("MQ_ROUTING_PREFIX", "example"),
        consumer_group=os.getenv("MQ_CONSUMER_GROUP", "example-consumers"),
        consumer_name=os.getenv("MQ_CONSUMER_NAME", "example-consumer-1"),
        enable_producer=os.getenv("MQ_ENABLE_PRODUCER", "true").lower() in ("true", "1"),
        max_stream_length=int(os.getenv("MQ_MAX_STREAM_LENGTH", "100000")),
        block_ms=int(os.getenv("MQ_BLOCK_MS", "1000")),
        batch_size=int(os.getenv("MQ_BATCH_SIZE", "10")),
    )


@lru_cache(maxsize=1)
def get_messaging_settings() -> MessagingSettings:
    """Retorna instância cacheada de MessagingSettings."""
    return _load_messaging_from_env()
