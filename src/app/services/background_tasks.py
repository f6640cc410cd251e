"""Registro de tasks assíncronas destacadas (fire-and-forget).

Cada task roda com:
- limite global de concorrência (semáforo)
- timeout próprio, independente da requisição que a criou
- callback de término que loga falhas (nunca propagadas ao chamador)

No shutdown, `drain()` aguarda as pendentes até um prazo e cancela o resto.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """Agenda e acompanha tasks destacadas.

    Args:
        max_concurrency: Tasks executando simultaneamente (demais aguardam).
        default_timeout_seconds: Timeout aplicado quando `spawn` não informa.
    """

    def __init__(
        self,
        max_concurrency: int = 100,
        default_timeout_seconds: float = 30.0,
    ) -> None:
        self._max_concurrency = max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._default_timeout = default_timeout_seconds
        self._active_tasks: set[asyncio.Task[Any]] = set()

    @property
    def active_count(self) -> int:
        return len(self._active_tasks)

    def spawn(
        self,
        name: str,
        coroutine: Coroutine[Any, Any, Any],
        *,
        timeout_seconds: float | None = None,
    ) -> asyncio.Task[Any]:
        """Agenda coroutine como task destacada e retorna a task criada.

        O chamador não precisa (nem deve) aguardar a task.
        """
        timeout = self._default_timeout if timeout_seconds is None else timeout_seconds
        task = asyncio.create_task(self._run(name, coroutine, timeout), name=name)
        self._active_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        logger.debug(
            "background_task_scheduled",
            extra={"task_name": name, "active_tasks": len(self._active_tasks)},
        )
        return task

    async def _run(
        self,
        name: str,
        coroutine: Coroutine[Any, Any, Any],
        timeout: float,
    ) -> None:
        if self._semaphore is None:
            # Criado sob o loop em execução
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
        async with self._semaphore:
            try:
                await asyncio.wait_for(coroutine, timeout=timeout)
            except TimeoutError:
                logger.warning(
                    "background_task_timeout",
                    extra={"task_name": name, "timeout_seconds": timeout},
                )
                raise

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._active_tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "background_task_failed",
                    extra={
                        "task_name": task.get_name(),
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._active_tasks),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda tasks pendentes durante shutdown; cancela as que estourarem o prazo."""
        if not self._active_tasks:
            return

        pending_now = list(self._active_tasks)
        logger.info(
            "background_tasks_shutdown_wait",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "background_tasks_shutdown_cancelled",
            extra={"cancelled_tasks": len(pending)},
        )
