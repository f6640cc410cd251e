"""Metadados de evento a partir do contexto da requisição."""

from __future__ import annotations

from app.domain.events import EventMetadata
from app.observability import get_correlation_id, get_user_id


def current_event_metadata() -> EventMetadata:
    """Monta EventMetadata com user_id e trace_id (correlation_id) atuais."""
    return EventMetadata(user_id=get_user_id(), trace_id=get_correlation_id())
