"""Erros de aplicação do serviço de Examples.

Hierarquia tipada usada por serviço, use case e transporte. A camada HTTP
mapeia `ErrorCategory`/`ErrorCode` para status codes; nenhuma camada
classifica erros por substring de mensagem.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Códigos estáveis expostos aos clientes (chaves de tradução)."""

    EXAMPLE_NOT_FOUND = "example_not_found"
    EXAMPLE_ALREADY_EXISTS = "example_already_exists"
    INVALID_ID = "invalid_id"
    INVALID_EMAIL = "invalid_email"
    INVALID_AGE = "invalid_age"
    INVALID_NAME = "invalid_name"
    INVALID_INPUT = "invalid_input"

    BUSINESS_LOGIC_FAIL = "business_logic_fail"
    CORPORATE_EMAIL_UNDERAGE = "corporate_email_underage"
    VIP_DOMAIN_UNDERAGE = "vip_domain_underage"
    PROFANITY_DETECTED = "profanity_detected"

    DATABASE_ERROR = "database_error"
    EXTERNAL_API_ERROR = "external_api_error"
    INTERNAL_ERROR = "internal_error"

    VALIDATION_FAILED = "validation_failed"


class ErrorCategory(StrEnum):
    """Classificação grossa usada pelos transportes."""

    VALIDATION = "validation"
    BUSINESS = "business"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    EXTERNAL = "external"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class AppError(Exception):
    """Erro base da aplicação.

    Attributes:
        code: Código estável do erro (também chave de tradução).
        details: Dados estruturados opcionais para o cliente.
        template_data: Valores usados na mensagem localizada.
    """

    category: ErrorCategory = ErrorCategory.INTERNAL
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str = "",
        *,
        code: ErrorCode | None = None,
        details: Any = None,
        template_data: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.code = code or self.default_code
        self.message = message or str(self.code)
        self.details = details
        self.template_data = dict(template_data or {})
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Serializa para resposta/log (sem stack)."""
        return {
            "code": str(self.code),
            "category": str(self.category),
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(AppError):
    """Entrada com formato inválido (nome, email, idade, id)."""

    category = ErrorCategory.VALIDATION
    default_code = ErrorCode.INVALID_INPUT


class ExampleValidationError(InvalidInputError):
    """Violação de invariante da entidade Example em um campo específico."""

    def __init__(self, field: str, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(
            message,
            code=code or _FIELD_CODES.get(field, ErrorCode.INVALID_INPUT),
            details={"field": field},
            template_data={"field": field},
        )
        self.field = field


_FIELD_CODES: dict[str, ErrorCode] = {
    "id": ErrorCode.INVALID_ID,
    "name": ErrorCode.INVALID_NAME,
    "email": ErrorCode.INVALID_EMAIL,
    "age": ErrorCode.INVALID_AGE,
}


class BusinessRuleError(AppError):
    """Regra de negócio violada (bloqueio, idade mínima por domínio)."""

    category = ErrorCategory.BUSINESS
    default_code = ErrorCode.BUSINESS_LOGIC_FAIL


class NotFoundError(AppError):
    """Example inexistente."""

    category = ErrorCategory.NOT_FOUND
    default_code = ErrorCode.EXAMPLE_NOT_FOUND


class AlreadyExistsError(AppError):
    """Conflito de unicidade (id ou email)."""

    category = ErrorCategory.CONFLICT
    default_code = ErrorCode.EXAMPLE_ALREADY_EXISTS


class DatabaseError(AppError):
    """Falha de persistência não classificada como not found/conflito."""

    category = ErrorCategory.INTERNAL
    default_code = ErrorCode.DATABASE_ERROR


class ExternalServiceError(AppError):
    """Falha ao chamar o colaborador externo numa operação que depende dele."""

    category = ErrorCategory.EXTERNAL
    default_code = ErrorCode.EXTERNAL_API_ERROR


class ValidationRejectedError(AppError):
    """Colaborador externo respondeu, mas rejeitou os dados."""

    category = ErrorCategory.BUSINESS
    default_code = ErrorCode.VALIDATION_FAILED


class DatabaseUnavailableError(DatabaseError):
    """Banco inacessível ou lento (conexão/timeout): falha transitória."""

    category = ErrorCategory.UNAVAILABLE


__all__ = [
    "AlreadyExistsError",
    "AppError",
    "BusinessRuleError",
    "DatabaseError",
    "DatabaseUnavailableError",
    "ErrorCategory",
    "ErrorCode",
    "ExampleValidationError",
    "ExternalServiceError",
    "InvalidInputError",
    "NotFoundError",
    "ValidationRejectedError",
]
