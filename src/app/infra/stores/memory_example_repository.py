"""Repositório de Examples em memória: desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Concorrência:
- mutações (create/update/delete) adquirem o lock em modo exclusivo;
  checagem de unicidade e escrita acontecem sob o mesmo lock
- leituras (get/list/count) adquirem o lock em modo compartilhado
- todo registro entra e sai como cópia defensiva
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from app.protocols.example_repository import (
    ExampleAlreadyExistsError,
    ExampleNotFoundError,
    ExampleRepositoryProtocol,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from app.domain.example import Example


class ReadWriteLock:
    """Lock leitores/escritor com preferência para escritores."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MemoryExampleRepository(ExampleRepositoryProtocol):
    """Repositório de Examples em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._by_id: dict[str, Example] = {}
        self._id_by_email: dict[str, str] = {}
        # Ordem de inserção desempata created_at iguais na listagem
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()

    # ──────────────────────────────────────────────────────────────
    # Implementação sync
    # ──────────────────────────────────────────────────────────────

    def _create_sync(self, example: Example) -> None:
        with self._lock.write():
            if example.id in self._by_id:
                raise ExampleAlreadyExistsError("id", example.id)
            if example.email in self._id_by_email:
                raise ExampleAlreadyExistsError("email", example.email)
            self._by_id[example.id] = example.copy()
            self._id_by_email[example.email] = example.id
            self._sequence[example.id] = next(self._counter)

    def _get_by_id_sync(self, example_id: str) -> Example:
        with self._lock.read():
            stored = self._by_id.get(example_id)
            if stored is None:
                raise ExampleNotFoundError(example_id)
            return stored.copy()

    def _get_by_email_sync(self, email: str) -> Example:
        with self._lock.read():
            example_id = self._id_by_email.get(email)
            if example_id is None:
                raise ExampleNotFoundError(email)
            return self._by_id[example_id].copy()

    def _update_sync(self, example: Example) -> Example:
        with self._lock.write():
            stored = self._by_id.get(example.id)
            if stored is None:
                raise ExampleNotFoundError(example.id)
            owner = self._id_by_email.get(example.email)
            if owner is not None and owner != example.id:
                raise ExampleAlreadyExistsError("email", example.email)

            updated = example.copy()
            updated.created_at = stored.created_at
            updated.touch(stored.updated_at)

            if stored.email != updated.email:
                del self._id_by_email[stored.email]
                self._id_by_email[updated.email] = updated.id
            self._by_id[updated.id] = updated
            return updated.copy()

    def _delete_sync(self, example_id: str) -> None:
        with self._lock.write():
            stored = self._by_id.pop(example_id, None)
            if stored is None:
                raise ExampleNotFoundError(example_id)
            del self._id_by_email[stored.email]
            del self._sequence[example_id]

    def _list_sync(self, limit: int, offset: int) -> list[Example]:
        with self._lock.read():
            ordered = sorted(
                self._by_id.values(),
                key=lambda item: (item.created_at, self._sequence[item.id]),
                reverse=True,
            )
            return [item.copy() for item in ordered[offset : offset + limit]]

    def _count_sync(self) -> int:
        with self._lock.read():
            return len(self._by_id)

    # ──────────────────────────────────────────────────────────────
    # Async API (ExampleRepositoryProtocol)
    # ──────────────────────────────────────────────────────────────

    async def create(self, example: Example) -> None:
        """Persiste novo Example (async wrapper)."""
        self._create_sync(example)

    async def get_by_id(self, example_id: str) -> Example:
        """Busca por id (async wrapper)."""
        return self._get_by_id_sync(example_id)

    async def get_by_email(self, email: str) -> Example:
        """Busca por email (async wrapper)."""
        return self._get_by_email_sync(email)

    async def update(self, example: Example) -> Example:
        """Atualiza Example (async wrapper)."""
        return self._update_sync(example)

    async def delete(self, example_id: str) -> None:
        """Remove Example (async wrapper)."""
        self._delete_sync(example_id)

    async def list(self, limit: int, offset: int) -> list[Example]:
        """Lista página ordenada por created_at desc (async wrapper)."""
        return self._list_sync(limit, offset)

    async def count(self) -> int:
        """Conta registros (async wrapper)."""
        return self._count_sync()

    async def ping(self) -> None:
        """Sempre disponível."""

    async def close(self) -> None:
        """Nada a liberar."""
