"""Serviços de aplicação.

Regras de negócio e utilitários de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.background_tasks import BackgroundTaskRunner
from app.services.example_service import ExampleService, generate_example_id

__all__ = [
    "BackgroundTaskRunner",
    "ExampleService",
    "generate_example_id",
]
