"""Publisher de eventos em memória: desenvolvimento e testes.

Apenas registra os eventos publicados (inspecionáveis via `events`).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.domain.events import ExampleEvent
from app.infra.messaging.context import current_event_metadata
from app.protocols.event_publisher import EventPublisherProtocol
from utils.errors import MessagingError

if TYPE_CHECKING:
    from app.domain.events import EventMetadata
    from app.domain.example import Example

logger = logging.getLogger(__name__)


class MemoryEventPublisher(EventPublisherProtocol):
    """Publisher que guarda eventos numa lista.

    Args:
        routing_prefix: Prefixo da routing key.
        should_fail: Simula falha de publicação (MessagingError).
    """

    def __init__(self, routing_prefix: str = "example", should_fail: bool = False) -> None:
        self._routing_prefix = routing_prefix
        self._should_fail = should_fail
        self._closed = False
        self.events: list[ExampleEvent] = []
        self.routing_keys: list[str] = []

    def set_should_fail(self, should_fail: bool) -> None:
        self._should_fail = should_fail

    def clear(self) -> None:
        self.events.clear()
        self.routing_keys.clear()

    async def _publish(self, event: ExampleEvent) -> None:
        if self._closed:
            raise MessagingError("publisher closed")
        if self._should_fail:
            raise MessagingError("simulated publish failure")
        routing_key = event.routing_key(self._routing_prefix)
        self.events.append(event)
        self.routing_keys.append(routing_key)
        logger.debug(
            "event_published",
            extra={"event_id": event.id, "event_type": str(event.type), "routing_key": routing_key},
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
        self._closed = True
