"""Eventos de domínio publicados após mutações de Example.

Formato serializado (JSON):
    {
        "id": "evt_<hex>",
        "type": "example.created",
        "timestamp": "2026-01-01T00:00:00+00:00",
        "payload": {...},
        "metadata": {"source": "example-api", "version": "1.0", ...}
    }
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from app.domain.example import Example

EVENT_SOURCE = "example-api"
EVENT_VERSION = "1.0"


class EventType(StrEnum):
    """Tipos de evento suportados."""

    EXAMPLE_CREATED = "example.created"
    EXAMPLE_UPDATED = "example.updated"
    EXAMPLE_DELETED = "example.deleted"


class EventMetadata(BaseModel):
    """Metadados de rastreamento do evento."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: str = EVENT_SOURCE
    version: str = EVENT_VERSION
    user_id: str = "system"
    trace_id: str = ""


class ExampleEventPayload(BaseModel):
    """Snapshot do Example no momento do evento.

    Em `example.deleted` apenas id, name e email são preenchidos.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    email: str
    age: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    external_data: dict[str, Any] | None = None
    enrichment: dict[str, Any] | None = None


def _generate_event_id() -> str:
    return f"evt_{uuid.uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ExampleEvent(BaseModel):
    """Envelope de evento de Example."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=_generate_event_id)
    type: EventType
    timestamp: datetime = Field(default_factory=_utcnow)
    payload: ExampleEventPayload
    metadata: EventMetadata = Field(default_factory=EventMetadata)

    @classmethod
    def created(
        cls,
        example: Example,
        *,
        external_data: dict[str, Any] | None = None,
        enrichment: dict[str, Any] | None = None,
        metadata: EventMetadata | None = None,
    ) -> ExampleEvent:
        return cls(
            type=EventType.EXAMPLE_CREATED,
            payload=_full_payload(example, external_data, enrichment),
            metadata=metadata or EventMetadata(),
        )

    @classmethod
    def updated(
        cls,
        example: Example,
        *,
        external_data: dict[str, Any] | None = None,
        enrichment: dict[str, Any] | None = None,
        metadata: EventMetadata | None = None,
    ) -> ExampleEvent:
        return cls(
            type=EventType.EXAMPLE_UPDATED,
            payload=_full_payload(example, external_data, enrichment),
            metadata=metadata or EventMetadata(),
        )

    @classmethod
    def deleted(
        cls,
        example_id: str,
        email: str,
        name: str,
        *,
        metadata: EventMetadata | None = None,
    ) -> ExampleEvent:
        return cls(
            type=EventType.EXAMPLE_DELETED,
            payload=ExampleEventPayload(id=example_id, name=name, email=email),
            metadata=metadata or EventMetadata(),
        )

    def routing_key(self, prefix: str) -> str:
        """Chave de roteamento `<prefix>.<type>` (ex.: example.example.created)."""
        return f"{prefix}.{self.type}"

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: str | bytes) -> ExampleEvent:
        return cls.model_validate_json(raw)


def _full_payload(
    example: Example,
    external_data: dict[str, Any] | None,
    enrichment: dict[str, Any] | None,
) -> ExampleEventPayload:
    return ExampleEventPayload(
        id=example.id,
        name=example.name,
        email=example.email,
        age=example.age,
        created_at=example.created_at,
        updated_at=example.updated_at,
        external_data=external_data,
        enrichment=enrichment,
    )


__all__ = [
    "EVENT_SOURCE",
    "EVENT_VERSION",
    "EventMetadata",
    "EventType",
    "ExampleEvent",
    "ExampleEventPayload",
]
