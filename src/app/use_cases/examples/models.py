"""Modelos de entrada/saída do use case de Examples."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.example import Example
    from app.protocols.external_example_api import ExternalExampleData


@dataclass(frozen=True, slots=True)
class CreateExampleRequest:
    name: str
    email: str
    age: int


@dataclass(frozen=True, slots=True)
class UpdateExampleRequest:
    name: str
    email: str
    age: int


@dataclass(frozen=True, slots=True)
class ListExamplesRequest:
    limit: int = 10
    offset: int = 0


@dataclass(slots=True)
class ExampleWithMetadata:
    """Example mais dados externos opcionais.

    `external_data` e `enrichment` são independentes: qualquer um pode
    ficar ausente quando a chamada correspondente falhar.
    """

    example: Example
    external_data: ExternalExampleData | None = None
    enrichment: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.example.to_dict(),
            "external_data": self.external_data.to_dict() if self.external_data else None,
            "enrichment": self.enrichment,
        }


@dataclass(slots=True)
class ListExamplesResponse:
    """Página de Examples com metadados de paginação."""

    examples: list[ExampleWithMetadata] = field(default_factory=list)
    total: int = 0
    limit: int = 10
    offset: int = 0

    @property
    def has_next(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.offset > 0

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)
