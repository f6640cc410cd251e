"""Testes da hierarquia de erros de aplicação."""

from __future__ import annotations

from app.domain.errors import (
    AlreadyExistsError,
    BusinessRuleError,
    ErrorCategory,
    ErrorCode,
    ExternalServiceError,
    InvalidInputError,
    NotFoundError,
    ValidationRejectedError,
)


def test_defaults_come_from_subclass() -> None:
    assert NotFoundError().code == ErrorCode.EXAMPLE_NOT_FOUND
    assert NotFoundError().category == ErrorCategory.NOT_FOUND
    assert AlreadyExistsError().category == ErrorCategory.CONFLICT
    assert ExternalServiceError().code == ErrorCode.EXTERNAL_API_ERROR
    assert ValidationRejectedError().code == ErrorCode.VALIDATION_FAILED


def test_message_defaults_to_code() -> None:
    assert InvalidInputError().message == "invalid_input"


def test_explicit_code_and_template_data() -> None:
    error = BusinessRuleError(
        "VIP accounts require minimum age of 21",
        code=ErrorCode.VIP_DOMAIN_UNDERAGE,
        template_data={"min_age": 21},
    )

    assert error.code == ErrorCode.VIP_DOMAIN_UNDERAGE
    assert error.template_data == {"min_age": 21}
    assert error.to_dict()["category"] == "business"


def test_cause_is_chained() -> None:
    cause = TimeoutError("slow")
    error = ExternalServiceError("external validation failed", cause=cause)

    assert error.__cause__ is cause
