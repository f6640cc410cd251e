"""DTOs HTTP de Examples (pydantic) e conversões de/para o use case."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from app.use_cases.examples import CreateExampleRequest, UpdateExampleRequest

if TYPE_CHECKING:
    from app.use_cases.examples import ExampleWithMetadata, ListExamplesResponse


class CreateExampleRequestDTO(BaseModel):
    """Só tipos: faixas e formato ficam com o ExampleService (configuráveis)."""

    name: str
    email: str
    age: int

    def to_request(self) -> CreateExampleRequest:
        return CreateExampleRequest(name=self.name, email=self.email, age=self.age)


class UpdateExampleRequestDTO(BaseModel):
    name: str
    email: str
    age: int

    def to_request(self) -> UpdateExampleRequest:
        return UpdateExampleRequest(name=self.name, email=self.email, age=self.age)


class ExternalExampleDataDTO(BaseModel):
    external_id: str
    metadata: dict[str, str]
    score: float
    last_modified: datetime | None = None


class ExampleResponseDTO(BaseModel):
    """Example com dados externos opcionais (ausentes quando a chamada falhou)."""

    id: str
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime
    external_data: ExternalExampleDataDTO | None = None
    enrichment: dict[str, Any] | None = None

    @classmethod
    def from_result(cls, result: ExampleWithMetadata) -> ExampleResponseDTO:
        example = result.example
        external = result.external_data
        return cls(
            id=example.id,
            name=example.name,
            email=example.email,
            age=example.age,
            created_at=example.created_at,
            updated_at=example.updated_at,
            external_data=(
                ExternalExampleDataDTO(
                    external_id=external.external_id,
                    metadata=dict(external.metadata),
                    score=external.score,
                    last_modified=external.last_modified,
                )
                if external is not None
                else None
            ),
            enrichment=result.enrichment,
        )


class ListExamplesResponseDTO(BaseModel):
    examples: list[ExampleResponseDTO]
    total: int
    limit: int
    offset: int
    has_next: bool
    has_prev: bool
    total_pages: int

    @classmethod
    def from_response(cls, response: ListExamplesResponse) -> ListExamplesResponseDTO:
        return cls(
            examples=[ExampleResponseDTO.from_result(item) for item in response.examples],
            total=response.total,
            limit=response.limit,
            offset=response.offset,
            has_next=response.has_next,
            has_prev=response.has_prev,
            total_pages=response.total_pages,
        )


class ErrorResponseDTO(BaseModel):
    error: str
    message: str
    code: str
    details: Any = None


class SuccessResponseDTO(BaseModel):
    success: bool = True
    message: str


class HealthResponseDTO(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    services: dict[str, str] = Field(default_factory=dict)
