"""Protocolo de persistência de Example.

Define o contrato comum aos backends (memória, SQL) e os erros de
repositório que todo backend deve emitir. Falhas de conexão/timeout usam
`RepositoryConnectionError`/`RepositoryTimeoutError` de `utils.errors`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.example import Example


class RepositoryError(Exception):
    """Base para erros semânticos de repositório."""


class ExampleNotFoundError(RepositoryError):
    """Nenhum registro com o id/email informado."""

    def __init__(self, key: str) -> None:
        super().__init__(f"example not found: {key}")
        self.key = key


class ExampleAlreadyExistsError(RepositoryError):
    """Id ou email já pertence a outro registro."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"example already exists with {field}")
        self.field = field
        self.value = value


class ExampleRepositoryProtocol(Protocol):
    """Contrato assíncrono para armazenamento de Example.

    Todo Example retornado é uma cópia independente do estado armazenado.
    """

    async def create(self, example: Example) -> None:
        """Persiste novo registro.

        Raises:
            ExampleAlreadyExistsError: Se id ou email já existir.
        """
        ...

    async def get_by_id(self, example_id: str) -> Example:
        """Busca por id. Raises ExampleNotFoundError."""
        ...

    async def get_by_email(self, email: str) -> Example:
        """Busca por email. Raises ExampleNotFoundError."""
        ...

    async def update(self, example: Example) -> Example:
        """Substitui o estado armazenado e retorna a versão persistida.

        `updated_at` da versão persistida é estritamente maior que o anterior.

        Raises:
            ExampleNotFoundError: Se o id não existir.
            ExampleAlreadyExistsError: Se o email pertencer a outro registro.
        """
        ...

    async def delete(self, example_id: str) -> None:
        """Remove definitivamente. Raises ExampleNotFoundError."""
        ...

    async def list(self, limit: int, offset: int) -> list[Example]:
        """Página ordenada por created_at decrescente."""
        ...

    async def count(self) -> int:
        """Total de registros."""
        ...

    async def ping(self) -> None:
        """Verifica disponibilidade do backend (readiness)."""
        ...

    async def close(self) -> None:
        """Libera conexões/recursos."""
        ...
