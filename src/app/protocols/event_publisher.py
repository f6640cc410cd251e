"""Protocolo de publicação de eventos de Example."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.events import EventMetadata
    from app.domain.example import Example


class EventPublisherProtocol(Protocol):
    """Publica eventos best-effort após mutações.

    Falhas são sinalizadas com `MessagingError`.
    """

    async def publish_created(
        self,
        example: Example,
        *,
        external_data: dict[str, Any] | None = None,
        enrichment: dict[str, Any] | None = None,
        metadata: EventMetadata | None = None,
    ) -> None: ...

    async def publish_updated(
        self,
        example: Example,
        *,
        external_data: dict[str, Any] | None = None,
        enrichment: dict[str, Any] | None = None,
        metadata: EventMetadata | None = None,
    ) -> None: ...

    async def publish_deleted(
        self,
        example_id: str,
        email: str,
        name: str,
        *,
        metadata: EventMetadata | None = None,
    ) -> None: ...

    async def close(self) -> None: ...
