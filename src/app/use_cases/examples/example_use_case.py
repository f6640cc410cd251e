"""Use case de orquestração de Examples.

Combina o ExampleService com o colaborador externo:

- leitura/atualização: fan-out paralelo de `fetch_data` e `enrich` sob um
  prazo compartilhado; ambos são sempre aguardados e cada resultado é
  aplicado de forma independente (falha de um não descarta o outro)
- criação: escrita primária concluída antes de agendar a notificação,
  que roda destacada, com timeout próprio, sem bloquear o chamador
- validate-and-create: validação externa obrigatória antes da escrita
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from app.domain.errors import ExternalServiceError, ValidationRejectedError
from app.domain.example import mask_email
from app.observability import record_external_call
from app.use_cases.examples.models import ExampleWithMetadata, ListExamplesResponse
from config.logging import log_fallback
from config.settings.examples import ExampleTimeoutSettings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.domain.example import Example
    from app.protocols.external_example_api import ExternalExampleAPIProtocol
    from app.services.background_tasks import BackgroundTaskRunner
    from app.services.example_service import ExampleService
    from app.use_cases.examples.models import (
        CreateExampleRequest,
        ListExamplesRequest,
        UpdateExampleRequest,
    )

_module_logger = logging.getLogger(__name__)


class ExampleUseCase:
    """Orquestra serviço de negócio e colaborador externo.

    Args:
        service: ExampleService (regras + persistência).
        external_api: Colaborador externo.
        task_runner: Registro de tasks destacadas (notificações).
        timeouts: Prazos das chamadas externas.
        logger: Logger injetado (default: logger do módulo).
    """

    def __init__(
        self,
        service: ExampleService,
        external_api: ExternalExampleAPIProtocol,
        task_runner: BackgroundTaskRunner,
        timeouts: ExampleTimeoutSettings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._service = service
        self._external_api = external_api
        self._tasks = task_runner
        self._timeouts = timeouts or ExampleTimeoutSettings()
        self._logger = logger or _module_logger

    # ──────────────────────────────────────────────────────────────
    # Escrita
    # ──────────────────────────────────────────────────────────────

    async def create_example(self, request: CreateExampleRequest) -> ExampleWithMetadata:
        """Cria Example e agenda notificação em background.

        Escrita + agendamento ficam protegidos contra cancelamento do chamador:
        se a requisição cair no meio, o registro persistido ainda é notificado.
        """
        inner = asyncio.ensure_future(self._create_and_schedule(request))
        inner.add_done_callback(_consume_result)
        example = await asyncio.shield(inner)
        return ExampleWithMetadata(example=example)

    async def validate_and_create_example(
        self, request: CreateExampleRequest
    ) -> ExampleWithMetadata:
        """Valida externamente e só então cria.

        Raises:
            ExternalServiceError: validação externa falhou/expirou (nada é escrito).
            ValidationRejectedError: colaborador rejeitou os dados (nada é escrito).
        """
        started_at = time.perf_counter()
        try:
            async with asyncio.timeout(self._timeouts.external_call_timeout_seconds):
                is_valid = await self._external_api.validate(
                    request.name, request.email, request.age
                )
        except Exception as exc:
            outcome = "timeout" if isinstance(exc, TimeoutError) else "error"
            record_external_call("validate", outcome, _elapsed_ms(started_at))
            self._logger.error(
                "external_validation_failed",
                extra={"email": mask_email(request.email), "error_type": type(exc).__name__},
            )
            raise ExternalServiceError(
                f"external validation failed for user {request.name} ({request.email})",
                template_data={"name": request.name, "email": request.email},
                cause=exc,
            ) from exc

        if not is_valid:
            record_external_call("validate", "rejected", _elapsed_ms(started_at))
            self._logger.warning(
                "external_validation_rejected",
                extra={"email": mask_email(request.email)},
            )
            raise ValidationRejectedError(
                f"example {request.name} ({request.email}) rejected by external validation",
                template_data={"name": request.name, "email": request.email},
            )
        record_external_call("validate", "ok", _elapsed_ms(started_at))

        created = await self.create_example(request)
        return await self._enrich(created.example)

    async def update_example(
        self, example_id: str, request: UpdateExampleRequest
    ) -> ExampleWithMetadata:
        example = await self._service.update_example(
            example_id, request.name, request.email, request.age
        )
        return await self._enrich(example)

    async def delete_example(self, example_id: str) -> Example:
        return await self._service.delete_example(example_id)

    # ──────────────────────────────────────────────────────────────
    # Leitura
    # ──────────────────────────────────────────────────────────────

    async def get_example(self, example_id: str) -> ExampleWithMetadata:
        example = await self._service.get_example_by_id(example_id)
        return await self._enrich(example)

    async def get_example_by_email(self, email: str) -> ExampleWithMetadata:
        example = await self._service.get_example_by_email(email)
        return await self._enrich(example)

    async def list_examples(self, request: ListExamplesRequest) -> ListExamplesResponse:
        """Lista página; cada item é enriquecido em sequência (best-effort)."""
        examples, total = await self._service.list_examples(request.limit, request.offset)
        limit, offset = self._service.normalize_pagination(request.limit, request.offset)

        items = [await self._enrich(example) for example in examples]
        return ListExamplesResponse(examples=items, total=total, limit=limit, offset=offset)

    # ──────────────────────────────────────────────────────────────
    # Internos
    # ──────────────────────────────────────────────────────────────

    async def _create_and_schedule(self, request: CreateExampleRequest) -> Example:
        example = await self._service.create_example(request.name, request.email, request.age)
        self._schedule_notification(example)
        return example

    def _schedule_notification(self, example: Example) -> None:
        self._tasks.spawn(
            f"notify_created:{example.id}",
            self._notify_created(example.id, example.email),
            timeout_seconds=self._timeouts.notification_timeout_seconds,
        )

    async def _notify_created(self, example_id: str, email: str) -> None:
        started_at = time.perf_counter()
        try:
            await self._external_api.notify_created(example_id, email)
        except Exception as exc:
            record_external_call("notify_created", "error", _elapsed_ms(started_at))
            self._logger.warning(
                "external_notify_failed",
                extra={"example_id": example_id, "error_type": type(exc).__name__},
            )
            return
        record_external_call("notify_created", "ok", _elapsed_ms(started_at))

    async def _enrich(self, example: Example) -> ExampleWithMetadata:
        """Fan-out de fetch_data + enrich com prazo único compartilhado."""
        deadline = asyncio.get_running_loop().time() + self._timeouts.external_call_timeout_seconds
        external_data, enrichment = await asyncio.gather(
            self._bounded("fetch_data", example.id, deadline, self._external_api.fetch_data),
            self._bounded("enrich", example.id, deadline, self._external_api.enrich),
        )
        return ExampleWithMetadata(
            example=example,
            external_data=external_data,
            enrichment=enrichment,
        )

    async def _bounded(
        self,
        operation: str,
        example_id: str,
        deadline: float,
        call: Callable[[str], Awaitable[Any]],
    ) -> Any:
        """Executa uma chamada do fan-out; falha vira None (logada)."""
        started_at = time.perf_counter()
        try:
            async with asyncio.timeout_at(deadline):
                result = await call(example_id)
        except Exception as exc:
            outcome = "timeout" if isinstance(exc, TimeoutError) else "error"
            elapsed_ms = _elapsed_ms(started_at)
            record_external_call(operation, outcome, elapsed_ms)
            log_fallback(self._logger, f"example_{operation}", reason=outcome, elapsed_ms=elapsed_ms)
            self._logger.debug(
                "example_external_call_failed",
                extra={
                    "operation": operation,
                    "example_id": example_id,
                    "error_type": type(exc).__name__,
                },
            )
            return None
        record_external_call(operation, "ok", _elapsed_ms(started_at))
        return result


def _elapsed_ms(started_at: float) -> float:
    return (time.perf_counter() - started_at) * 1000


def _consume_result(task: asyncio.Future[Any]) -> None:
    # Evita "exception was never retrieved" quando o chamador foi cancelado
    if not task.cancelled():
        task.exception()
