"""Use cases de Examples."""

from app.use_cases.examples.example_use_case import ExampleUseCase
from app.use_cases.examples.models import (
    CreateExampleRequest,
    ExampleWithMetadata,
    ListExamplesRequest,
    ListExamplesResponse,
    UpdateExampleRequest,
)

__all__ = [
    "CreateExampleRequest",
    "ExampleUseCase",
    "ExampleWithMetadata",
    "ListExamplesRequest",
    "ListExamplesResponse",
    "UpdateExampleRequest",
]
