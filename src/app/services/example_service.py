"""Serviço de negócio de Examples.

Responsabilidades:
- validação de formato da entrada (antes de construir a entidade)
- regras de negócio (nome bloqueado, idade mínima por domínio de email)
- geração de id e checagem de unicidade de email
- tradução de erros de repositório para erros de aplicação

Não faz IO externo além do repositório e não lê variáveis de ambiente:
regras e logger chegam pelo construtor.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from app.domain.errors import (
    AlreadyExistsError,
    BusinessRuleError,
    DatabaseError,
    DatabaseUnavailableError,
    ErrorCode,
    InvalidInputError,
    NotFoundError,
)
from app.domain.example import Example, mask_email
from app.protocols.example_repository import (
    ExampleAlreadyExistsError,
    ExampleNotFoundError,
)
from config.settings.examples import ExampleRulesSettings
from utils.errors import RepositoryConnectionError, RepositoryTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.errors import AppError
    from app.protocols.example_repository import ExampleRepositoryProtocol

_module_logger = logging.getLogger(__name__)

ID_PREFIX = "ex_"


def generate_example_id() -> str:
    """Gera id opaco `ex_<uuid4 hex>`."""
    return f"{ID_PREFIX}{uuid.uuid4().hex}"


def is_valid_email_format(email: str) -> bool:
    """Checagem básica: um único `@`, parte local não vazia e `.` no domínio."""
    if len(email) < 5:
        return False
    local, sep, domain = email.partition("@")
    if not sep or not local or "@" in domain:
        return False
    dot_index = domain.rfind(".")
    return 0 < dot_index < len(domain) - 1


class ExampleService:
    """Regras de negócio de Examples sobre um repositório.

    Args:
        repository: Implementação de ExampleRepositoryProtocol.
        rules: Regras e limites (paginação, idade, domínios, bloqueios).
        logger: Logger injetado (default: logger do módulo).
        id_factory: Gerador de ids (default: `ex_<uuid4 hex>`).
    """

    def __init__(
        self,
        repository: ExampleRepositoryProtocol,
        rules: ExampleRulesSettings | None = None,
        logger: logging.Logger | None = None,
        id_factory: Callable[[], str] = generate_example_id,
    ) -> None:
        self._repository = repository
        self._rules = rules or ExampleRulesSettings()
        self._logger = logger or _module_logger
        self._id_factory = id_factory

    @property
    def rules(self) -> ExampleRulesSettings:
        return self._rules

    # ──────────────────────────────────────────────────────────────
    # Operações
    # ──────────────────────────────────────────────────────────────

    async def create_example(self, name: str, email: str, age: int) -> Example:
        """Valida, aplica regras e persiste novo Example."""
        self._validate_input(name, email, age)
        self.validate_business_rules(name, email, age)

        example_id = self._id_factory()
        example = Example.create(example_id, name, email, age)

        await self._ensure_email_available(email, operation="create")

        try:
            await self._repository.create(example)
        except Exception as exc:
            raise self._map_repository_error(exc, "create", example_id) from exc

        self._logger.info(
            "example_created",
            extra={"example_id": example_id, "email": mask_email(email)},
        )
        return example

    async def get_example_by_id(self, example_id: str) -> Example:
        if not example_id:
            raise InvalidInputError("id cannot be empty", code=ErrorCode.INVALID_ID)
        try:
            return await self._repository.get_by_id(example_id)
        except Exception as exc:
            raise self._map_repository_error(exc, "get_by_id", example_id) from exc

    async def get_example_by_email(self, email: str) -> Example:
        if not email:
            raise InvalidInputError("email cannot be empty", code=ErrorCode.INVALID_EMAIL)
        try:
            return await self._repository.get_by_email(email)
        except Exception as exc:
            raise self._map_repository_error(exc, "get_by_email", mask_email(email)) from exc

    async def update_example(self, example_id: str, name: str, email: str, age: int) -> Example:
        """Atualiza Example existente; falha não altera o registro armazenado."""
        if not example_id:
            raise InvalidInputError("id cannot be empty", code=ErrorCode.INVALID_ID)
        self._validate_input(name, email, age)
        self.validate_business_rules(name, email, age)

        example = await self.get_example_by_id(example_id)
        if example.email != email:
            await self._ensure_email_available(email, operation="update")

        example.update(name, email, age)
        try:
            updated = await self._repository.update(example)
        except Exception as exc:
            raise self._map_repository_error(exc, "update", example_id) from exc

        self._logger.info("example_updated", extra={"example_id": example_id})
        return updated

    async def delete_example(self, example_id: str) -> Example:
        """Remove Example e retorna o estado anterior à remoção."""
        if not example_id:
            raise InvalidInputError("id cannot be empty", code=ErrorCode.INVALID_ID)
        example = await self.get_example_by_id(example_id)
        try:
            await self._repository.delete(example_id)
        except Exception as exc:
            raise self._map_repository_error(exc, "delete", example_id) from exc
        self._logger.info("example_deleted", extra={"example_id": example_id})
        return example

    async def list_examples(self, limit: int, offset: int) -> tuple[list[Example], int]:
        """Retorna página (após normalizar limit/offset) e total."""
        limit, offset = self.normalize_pagination(limit, offset)
        try:
            examples = await self._repository.list(limit, offset)
            total = await self._repository.count()
        except Exception as exc:
            raise self._map_repository_error(exc, "list", "") from exc

        self._logger.debug(
            "examples_listed",
            extra={"count": len(examples), "total": total, "limit": limit, "offset": offset},
        )
        return examples, total

    def normalize_pagination(self, limit: int, offset: int) -> tuple[int, int]:
        """limit <= 0 vira o padrão; limit acima do máximo é truncado; offset >= 0."""
        if limit <= 0:
            limit = self._rules.default_page_size
        limit = min(limit, self._rules.max_page_size)
        return limit, max(offset, 0)

    def validate_business_rules(self, name: str, email: str, age: int) -> None:
        """Aplica regras de negócio; a primeira violação vence.

        Raises:
            BusinessRuleError: profanity_detected, corporate_email_underage
                ou vip_domain_underage.
        """
        rules = self._rules
        if name in rules.blocked_names:
            raise BusinessRuleError(
                "name contains inappropriate content",
                code=ErrorCode.PROFANITY_DETECTED,
                details={"field": "name"},
            )

        email_lower = email.lower()
        if email_lower.endswith(rules.corporate_domains) and age < rules.corporate_min_age:
            raise BusinessRuleError(
                f"corporate accounts require minimum age of {rules.corporate_min_age}",
                code=ErrorCode.CORPORATE_EMAIL_UNDERAGE,
                details={"age": age, "min_age": rules.corporate_min_age},
                template_data={"min_age": rules.corporate_min_age},
            )

        if email_lower.endswith(rules.vip_domains) and age < rules.vip_min_age:
            raise BusinessRuleError(
                f"VIP accounts require minimum age of {rules.vip_min_age}",
                code=ErrorCode.VIP_DOMAIN_UNDERAGE,
                details={"age": age, "min_age": rules.vip_min_age},
                template_data={"min_age": rules.vip_min_age},
            )

    # ──────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────

    def _validate_input(self, name: str, email: str, age: int) -> None:
        rules = self._rules
        if not name:
            raise InvalidInputError("name cannot be empty", code=ErrorCode.INVALID_NAME)
        if not rules.min_name_length <= len(name) <= rules.max_name_length:
            raise InvalidInputError(
                f"name length must be between {rules.min_name_length} "
                f"and {rules.max_name_length} characters",
                code=ErrorCode.INVALID_NAME,
                details={"length": len(name)},
                template_data={"min": rules.min_name_length, "max": rules.max_name_length},
            )

        if not email:
            raise InvalidInputError("email cannot be empty", code=ErrorCode.INVALID_EMAIL)
        if not is_valid_email_format(email):
            raise InvalidInputError("invalid email format", code=ErrorCode.INVALID_EMAIL)

        if not rules.min_age <= age <= rules.max_age:
            raise InvalidInputError(
                f"age must be between {rules.min_age} and {rules.max_age}",
                code=ErrorCode.INVALID_AGE,
                details={"age": age},
                template_data={"min": rules.min_age, "max": rules.max_age},
            )

    async def _ensure_email_available(self, email: str, *, operation: str) -> None:
        try:
            await self._repository.get_by_email(email)
        except ExampleNotFoundError:
            return
        except Exception as exc:
            raise self._map_repository_error(exc, operation, mask_email(email)) from exc
        raise AlreadyExistsError(
            "email already in use",
            details={"field": "email"},
        )

    def _map_repository_error(self, exc: Exception, operation: str, resource_id: str) -> AppError:
        """Converte erro de repositório em erro de aplicação (por tipo)."""
        details: dict[str, str] = {"operation": operation, "resource_id": resource_id}
        if isinstance(exc, ExampleNotFoundError):
            return NotFoundError("example not found", details=details)
        if isinstance(exc, ExampleAlreadyExistsError):
            return AlreadyExistsError("example already exists", details=details)

        if isinstance(exc, RepositoryConnectionError | RepositoryTimeoutError):
            error_type = "connection" if isinstance(exc, RepositoryConnectionError) else "timeout"
            error_class: type[DatabaseError] = DatabaseUnavailableError
        else:
            error_type = "unknown"
            error_class = DatabaseError
        self._logger.error(
            "example_repository_failed",
            extra={"operation": operation, "error_type": error_type, "cause": type(exc).__name__},
        )
        return error_class(
            "database operation failed",
            details={**details, "error_type": error_type},
        )
