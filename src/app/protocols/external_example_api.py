"""Protocolo do colaborador externo de Examples.

Implementações: mock (dev/test) e HTTP (httpx).
Falhas são sinalizadas com `ExternalServiceCallError` e subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class ExternalExampleData:
    """Dados externos associados a um Example."""

    external_id: str
    metadata: dict[str, str] = field(default_factory=dict)
    score: float = 0.0
    last_modified: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "external_id": self.external_id,
            "metadata": dict(self.metadata),
            "score": self.score,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
        }


class ExternalExampleAPIProtocol(Protocol):
    """Contrato assíncrono do colaborador externo."""

    async def fetch_data(self, example_id: str) -> ExternalExampleData: ...

    async def validate(self, name: str, email: str, age: int) -> bool: ...

    async def enrich(self, example_id: str) -> dict[str, Any]: ...

    async def notify_created(self, example_id: str, email: str) -> None: ...
