"""Publicação e consumo de eventos de Example via Redis Streams.

Formato de cada entrada do stream:
    _type        -> tipo do evento (example.created|updated|deleted)
    routing_key  -> `<prefix>.<type>`
    _data        -> JSON do ExampleEvent

Consumo em consumer group (at-least-once):
- sucesso do handler -> XACK
- tipo desconhecido ou payload inválido -> XACK (não há como reprocessar)
- InfrastructureError no handler -> sem XACK (fica pendente para nova entrega)
- demais erros do handler -> XACK e log de erro
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from redis.exceptions import ConnectionError as RedisConnError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from app.domain.events import EventType, ExampleEvent
from app.infra.messaging.context import current_event_metadata
from app.protocols.event_publisher import EventPublisherProtocol
from utils.errors import InfrastructureError, RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from redis.asyncio import Redis as AsyncRedis

    from app.domain.events import EventMetadata
    from app.domain.example import Example
    from config.settings import MessagingSettings

logger = logging.getLogger(__name__)


def _decode(value: Any) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class RedisStreamEventPublisher(EventPublisherProtocol):
    """Publisher de eventos em Redis Streams (XADD com MAXLEN aproximado).

    Args:
        redis_client: Cliente redis.asyncio.
        settings: MessagingSettings (stream, prefixo, maxlen).
    """

    def __init__(self, redis_client: AsyncRedis, settings: MessagingSettings) -> None:
        self._redis = redis_client
        self._stream = settings.stream_name
        self._routing_prefix = settings.routing_prefix
        self._max_len = settings.max_stream_length

    async def _publish(self, event: ExampleEvent) -> None:
        routing_key = event.routing_key(self._routing_prefix)
        fields = {
            "_type": str(event.type),
            "routing_key": routing_key,
            "_data": event.to_json(),
        }
        try:
            message_id = await self._redis.xadd(
                self._stream, fields, maxlen=self._max_len, approximate=True
            )
        except (RedisConnError, RedisTimeoutError) as exc:
            logger.error(
                "event_publish_failed",
                extra={
                    "event_id": event.id,
                    "event_type": str(event.type),
                    "error_type": type(exc).__name__,
                },
            )
            raise RedisConnectionError(f"falha ao publicar {event.type}") from exc

        logger.info(
            "event_published",
            extra={
                "event_id": event.id,
                "event_type": str(event.type),
                "routing_key": routing_key,
                "stream": self._stream,
                "message_id": _decode(message_id),
            },
        )

    async def publish_created(
        self,
        example: Example,
        *,
        external_data: dict[str, Any] | None = None,
        enrichment: dict[str, Any] | None = None,
        metadata: EventMetadata | None = None,
    ) -> None:
        await self._publish(
            ExampleEvent.created(
                example,
                external_data=external_data,
                enrichment=enrichment,
                metadata=metadata or current_event_metadata(),
            )
        )

    async def publish_updated(
        self,
        example: Example,
        *,
        external_data: dict[str, Any] | None = None,
        enrichment: dict[str, Any] | None = None,
        metadata: EventMetadata | None = None,
    ) -> None:
        await self._publish(
            ExampleEvent.updated(
                example,
                external_data=external_data,
                enrichment=enrichment,
                metadata=metadata or current_event_metadata(),
            )
        )

    async def publish_deleted(
        self,
        example_id: str,
        email: str,
        name: str,
        *,
        metadata: EventMetadata | None = None,
    ) -> None:
        await self._publish(
            ExampleEvent.deleted(
                example_id, email, name, metadata=metadata or current_event_metadata()
            )
        )

    async def close(self) -> None:
        await self._redis.aclose()


class RedisStreamEventConsumer:
    """Consumidor de eventos de Example em consumer group.

    Args:
        redis_client: Cliente redis.asyncio.
        handlers: Mapa EventType -> coroutine que processa o evento.
        settings: MessagingSettings (stream, grupo, consumidor, batch).
    """

    def __init__(
        self,
        redis_client: AsyncRedis,
        handlers: dict[EventType, Callable[[ExampleEvent], Awaitable[None]]],
        settings: MessagingSettings,
    ) -> None:
        self._redis = redis_client
        self._handlers = handlers
        self._stream = settings.stream_name
        self._group = settings.consumer_group
        self._consumer = settings.consumer_name
        self._batch_size = settings.batch_size
        self._block_ms = settings.block_ms
        self._running = False
        self.processed = 0

    async def ensure_group(self) -> None:
        """Cria consumer group (e stream) se não existir."""
        try:
            await self._redis.xgroup_create(self._stream, self._group, id="0", mkstream=True)
            logger.info(
                "consumer_group_created",
                extra={"stream": self._stream, "group": self._group},
            )
        except ResponseError as exc:
            if "BUSYGROUP" not in str(exc):
                raise

    async def run(self) -> None:
        """Loop de consumo até `stop()` ou cancelamento."""
        await self.ensure_group()
        self._running = True
        logger.info(
            "consumer_started",
            extra={"stream": self._stream, "group": self._group, "consumer": self._consumer},
        )
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                break
            except (RedisConnError, RedisTimeoutError) as exc:
                logger.warning("consumer_poll_failed", extra={"error_type": type(exc).__name__})
                await asyncio.sleep(1)
        logger.info("consumer_stopped", extra={"processed": self.processed})

    def stop(self) -> None:
        self._running = False

    async def poll_once(self) -> int:
        """Lê um lote e processa; retorna quantas mensagens foram lidas."""
        entries = await self._redis.xreadgroup(
            groupname=self._group,
            consumername=self._consumer,
            streams={self._stream: ">"},
            count=self._batch_size,
            block=self._block_ms,
        )
        read = 0
        for _stream, messages in entries or []:
            for message_id, fields in messages:
                read += 1
                await self.process_message(message_id, fields)
        return read

    async def process_message(self, message_id: Any, fields: dict[Any, Any]) -> bool:
        """Processa uma entrada; retorna True se foi confirmada (XACK)."""
        decoded = {_decode(k): _decode(v) for k, v in fields.items()}
        raw_type = decoded.get("_type", "")
        msg_id = _decode(message_id)

        try:
            event_type = EventType(raw_type)
        except ValueError:
            logger.warning("unknown_event_type", extra={"event_type": raw_type, "message_id": msg_id})
            await self._ack(message_id)
            return True

        try:
            event = ExampleEvent.from_json(decoded.get("_data", ""))
        except ValidationError:
            logger.error("malformed_event", extra={"event_type": raw_type, "message_id": msg_id})
            await self._ack(message_id)
            return True

        handler = self._handlers.get(event_type)
        if handler is None:
            logger.warning("unhandled_event_type", extra={"event_type": raw_type})
            await self._ack(message_id)
            return True

        try:
            await handler(event)
        except InfrastructureError as exc:
            logger.warning(
                "event_handler_retryable_failure",
                extra={"event_id": event.id, "error_type": type(exc).__name__},
            )
            return False
        except Exception as exc:
            logger.error(
                "event_handler_failed",
                extra={"event_id": event.id, "error_type": type(exc).__name__},
            )
            await self._ack(message_id)
            return True

        await self._ack(message_id)
        self.processed += 1
        return True

    async def _ack(self, message_id: Any) -> None:
        await self._redis.xack(self._stream, self._group, message_id)

    async def close(self) -> None:
        self.stop()
        await self._redis.aclose()
