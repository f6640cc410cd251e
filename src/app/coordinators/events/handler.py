"""Processamento de eventos de Example consumidos do stream.

Sem logs com PII: email sempre mascarado.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.events import EventType
from app.domain.example import mask_email

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.domain.events import ExampleEvent

logger = logging.getLogger(__name__)


class ExampleEventHandler:
    """Handlers por tipo de evento; `handlers()` monta o mapa do consumidor."""

    def handlers(self) -> dict[EventType, Callable[[ExampleEvent], Awaitable[None]]]:
        return {
            EventType.EXAMPLE_CREATED: self.handle_created,
            EventType.EXAMPLE_UPDATED: self.handle_updated,
            EventType.EXAMPLE_DELETED: self.handle_deleted,
        }

    async def handle(self, event: ExampleEvent) -> None:
        await self.handlers()[event.type](event)

    async def handle_created(self, event: ExampleEvent) -> None:
        payload = event.payload
        logger.info(
            "example_created_event_handled",
            extra={
                "event_id": event.id,
                "example_id": payload.id,
                "email": mask_email(payload.email),
                "has_external_data": payload.external_data is not None,
                "trace_id": event.metadata.trace_id,
            },
        )

    async def handle_updated(self, event: ExampleEvent) -> None:
        logger.info(
            "example_updated_event_handled",
            extra={
                "event_id": event.id,
                "example_id": event.payload.id,
                "trace_id": event.metadata.trace_id,
            },
        )

    async def handle_deleted(self, event: ExampleEvent) -> None:
        logger.info(
            "example_deleted_event_handled",
            extra={
                "event_id": event.id,
                "example_id": event.payload.id,
                "email": mask_email(event.payload.email),
                "trace_id": event.metadata.trace_id,
            },
        )
