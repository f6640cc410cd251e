"""Publicação e consumo de eventos de Example."""

from app.infra.messaging.context import current_event_metadata
from app.infra.messaging.memory_publisher import MemoryEventPublisher
from app.infra.messaging.redis_streams import (
    RedisStreamEventConsumer,
    RedisStreamEventPublisher,
)

__all__ = [
    "MemoryEventPublisher",
    "RedisStreamEventConsumer",
    "RedisStreamEventPublisher",
    "current_event_metadata",
]
