"""Colaborador externo simulado: desenvolvimento e testes.

Regras de validação simuladas:
- name == "invalid" -> rejeitado
- email == "blocked@example.com" -> rejeitado
- age < 13 -> rejeitado (COPPA)
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from app.domain.example import mask_email
from app.protocols.external_example_api import ExternalExampleAPIProtocol, ExternalExampleData
from utils.errors import ExternalServiceUnavailableError

logger = logging.getLogger(__name__)

MOCK_SOURCE = "mock_api"
MOCK_SCORE = 0.85
MIN_VALID_AGE = 13


class MockExternalExampleAPI(ExternalExampleAPIProtocol):
    """Mock configurável (latência e falha) do colaborador externo.

    Args:
        should_fail: Todas as chamadas levantam ExternalServiceUnavailableError.
        delay_seconds: Latência simulada antes de cada resposta (cancelável).
    """

    def __init__(self, should_fail: bool = False, delay_seconds: float = 0.0) -> None:
        self._should_fail = should_fail
        self._delay_seconds = delay_seconds

    def set_should_fail(self, should_fail: bool) -> None:
        self._should_fail = should_fail

    def set_delay(self, delay_seconds: float) -> None:
        self._delay_seconds = delay_seconds

    async def _simulate(self, operation: str) -> None:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        if self._should_fail:
            logger.debug("mock_external_api_failure", extra={"operation": operation})
            raise ExternalServiceUnavailableError(f"mock external api unavailable: {operation}")

    async def fetch_data(self, example_id: str) -> ExternalExampleData:
        await self._simulate("fetch_data")
        now = datetime.now(UTC)
        return ExternalExampleData(
            external_id=f"ext_{example_id}",
            metadata={
                "source": MOCK_SOURCE,
                "version": "1.0",
                "processed": now.isoformat(timespec="seconds"),
            },
            score=MOCK_SCORE,
            last_modified=now,
        )

    async def validate(self, name: str, email: str, age: int) -> bool:
        await self._simulate("validate")
        if name == "invalid":
            return False
        if email == "blocked@example.com":
            return False
        return age >= MIN_VALID_AGE

    async def enrich(self, example_id: str) -> dict[str, Any]:
        await self._simulate("enrich")
        return {
            "external_id": f"ext_{example_id}",
            "risk_score": 0.1,
            "verification": "pending",
            "location_data": {"country": "US", "region": "CA"},
            "preferences": {"marketing_emails": True, "notifications": False},
        }

    async def notify_created(self, example_id: str, email: str) -> None:
        await self._simulate("notify_created")
        logger.info(
            "mock_notification_sent",
            extra={"example_id": example_id, "email": mask_email(email)},
        )
