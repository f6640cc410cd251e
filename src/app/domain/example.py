"""Entidade Example: agregado raiz do serviço.

Invariantes garantidas pela própria entidade:
- name: 1..100 caracteres, apenas letras, espaços, hífens e apóstrofos,
  sem espaços nas pontas nem espaços duplos, e diferente das palavras bloqueadas
- email: formato local@dominio.tld
- age: 0..150
- created_at <= updated_at; updated_at avança estritamente a cada mutação

Mutação rejeitada não altera a instância.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from app.domain.errors import ExampleValidationError

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 100
AGE_MIN = 0
AGE_MAX = 150
BLOCKED_NAMES: tuple[str, ...] = ("badword1", "badword2")

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_NAME_CHARSET_REGEX = re.compile(r"^[A-Za-z' -]+$")

# Menor passo representável por datetime
_CLOCK_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def next_timestamp(previous: datetime) -> datetime:
    """Retorna o instante atual garantindo que seja estritamente > previous."""
    now = _utcnow()
    return now if now > previous else previous + _CLOCK_TICK


def validate_example_fields(name: str, email: str, age: int) -> None:
    """Aplica as invariantes de campo da entidade.

    Raises:
        ExampleValidationError: No primeiro campo inválido (name, email, age).
    """
    if not name:
        raise ExampleValidationError("name", "name cannot be empty")
    if len(name) > NAME_MAX_LENGTH:
        raise ExampleValidationError("name", f"name cannot exceed {NAME_MAX_LENGTH} characters")
    if not _NAME_CHARSET_REGEX.match(name):
        raise ExampleValidationError(
            "name", "name must contain only letters, spaces, hyphens and apostrophes"
        )
    if name != name.strip(" ") or "  " in name:
        raise ExampleValidationError("name", "name has leading, trailing or repeated spaces")
    if name in BLOCKED_NAMES:
        raise ExampleValidationError("name", "name is not allowed")

    if not email:
        raise ExampleValidationError("email", "email cannot be empty")
    if not EMAIL_REGEX.match(email):
        raise ExampleValidationError("email", "invalid email format")

    if isinstance(age, bool) or not isinstance(age, int):
        raise ExampleValidationError("age", "age must be an integer")
    if age < AGE_MIN:
        raise ExampleValidationError("age", "age cannot be negative")
    if age > AGE_MAX:
        raise ExampleValidationError("age", f"age cannot exceed {AGE_MAX}")


@dataclass(slots=True)
class Example:
    """Registro Example.

    Construir sempre via `Example.create()` (valida) ou `Example.restore()`
    (reidratação a partir de persistência confiável).
    """

    id: str
    name: str
    email: str
    age: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        example_id: str,
        name: str,
        email: str,
        age: int,
        *,
        now: datetime | None = None,
    ) -> Example:
        """Cria Example validado; nenhuma instância existe se a validação falhar."""
        if not example_id:
            raise ExampleValidationError("id", "id cannot be empty")
        validate_example_fields(name, email, age)
        timestamp = now or _utcnow()
        return cls(
            id=example_id,
            name=name,
            email=email,
            age=age,
            created_at=timestamp,
            updated_at=timestamp,
        )

    @classmethod
    def restore(
        cls,
        example_id: str,
        name: str,
        email: str,
        age: int,
        created_at: datetime,
        updated_at: datetime,
    ) -> Example:
        """Reidrata registro persistido sem revalidar regras."""
        return cls(
            id=example_id,
            name=name,
            email=email,
            age=age,
            created_at=_ensure_utc(created_at),
            updated_at=_ensure_utc(updated_at),
        )

    def update(self, name: str, email: str, age: int) -> None:
        """Substitui name/email/age após validar; updated_at avança estritamente."""
        validate_example_fields(name, email, age)
        self.name = name
        self.email = email
        self.age = age
        self.updated_at = next_timestamp(self.updated_at)

    def touch(self, previous: datetime | None = None) -> None:
        """Avança updated_at acima do maior entre o valor atual e `previous`."""
        floor = max(self.updated_at, previous) if previous else self.updated_at
        self.updated_at = next_timestamp(floor)

    def copy(self) -> Example:
        """Cópia independente (sem aliasing com o armazenamento)."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Serializa para eventos/respostas."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "age": self.age,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"Example(id={self.id}, name={self.name}, age={self.age})"


def _ensure_utc(value: datetime) -> datetime:
    # SQLite devolve datetimes naive
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def mask_email(email: str) -> str:
    """Mascara email para logs (jo***@dominio)."""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:2]}***@{domain}"


__all__ = [
    "AGE_MAX",
    "AGE_MIN",
    "BLOCKED_NAMES",
    "EMAIL_REGEX",
    "NAME_MAX_LENGTH",
    "NAME_MIN_LENGTH",
    "Example",
    "mask_email",
    "next_timestamp",
    "validate_example_fields",
]
