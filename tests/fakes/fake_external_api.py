"""Fake do colaborador externo com comportamento por operação.

Cada operação pode ter atraso e/ou erro próprios, e todas as chamadas
ficam registradas para asserções (ordem, concorrência, cancelamento).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from app.protocols.external_example_api import ExternalExampleData
from utils.errors import ExternalServiceUnavailableError


@dataclass
class OperationBehavior:
    delay_seconds: float = 0.0
    error: Exception | None = None


@dataclass
class FakeExternalExampleAPI:
    """Implementa ExternalExampleAPIProtocol sem IO."""

    validate_result: bool = True
    behaviors: dict[str, OperationBehavior] = field(default_factory=dict)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)
    notified: list[tuple[str, str]] = field(default_factory=list)
    cancelled: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    def configure(
        self,
        operation: str,
        *,
        delay_seconds: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.behaviors[operation] = OperationBehavior(delay_seconds, error)

    def fail(self, operation: str, message: str = "unavailable") -> None:
        self.configure(operation, error=ExternalServiceUnavailableError(message))

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def _run(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        behavior = self.behaviors.get(operation, OperationBehavior())
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if behavior.delay_seconds:
                await asyncio.sleep(behavior.delay_seconds)
        except asyncio.CancelledError:
            self.cancelled.append(operation)
            raise
        finally:
            self.in_flight -= 1
        if behavior.error is not None:
            raise behavior.error

    async def fetch_data(self, example_id: str) -> ExternalExampleData:
        await self._run("fetch_data", example_id)
        return ExternalExampleData(
            external_id=f"ext_{example_id}",
            metadata={"source": "fake"},
            score=0.5,
            last_modified=datetime(2026, 1, 1, tzinfo=UTC),
        )

    async def validate(self, name: str, email: str, age: int) -> bool:
        await self._run("validate", name, email, age)
        return self.validate_result

    async def enrich(self, example_id: str) -> dict[str, Any]:
        await self._run("enrich", example_id)
        return {"external_id": f"ext_{example_id}", "tier": "gold"}

    async def notify_created(self, example_id: str, email: str) -> None:
        await self._run("notify_created", example_id, email)
        self.notified.append((example_id, email))
