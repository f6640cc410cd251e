"""Testes da entidade Example."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.domain.errors import ErrorCode, ExampleValidationError
from app.domain.example import Example, mask_email, next_timestamp

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _example(**overrides: object) -> Example:
    data: dict = {"example_id": "ex_1", "name": "John Doe", "email": "john@example.com", "age": 30}
    data.update(overrides)
    return Example.create(**data, now=NOW)


class TestCreate:
    def test_valid_example_has_equal_timestamps(self) -> None:
        example = _example()

        assert example.id == "ex_1"
        assert example.created_at == example.updated_at == NOW

    def test_boundary_ages_are_accepted(self) -> None:
        assert _example(age=0).age == 0
        assert _example(age=150).age == 150

    def test_name_with_hyphen_and_apostrophe(self) -> None:
        assert _example(name="Mary-Jane O'Neil").name == "Mary-Jane O'Neil"

    @pytest.mark.parametrize(
        ("overrides", "field", "code"),
        [
            ({"name": ""}, "name", ErrorCode.INVALID_NAME),
            ({"name": "x" * 101}, "name", ErrorCode.INVALID_NAME),
            ({"name": "John3"}, "name", ErrorCode.INVALID_NAME),
            ({"name": " John"}, "name", ErrorCode.INVALID_NAME),
            ({"name": "John  Doe"}, "name", ErrorCode.INVALID_NAME),
            ({"email": ""}, "email", ErrorCode.INVALID_EMAIL),
            ({"email": "not-an-email"}, "email", ErrorCode.INVALID_EMAIL),
            ({"email": "john@example"}, "email", ErrorCode.INVALID_EMAIL),
            ({"age": -1}, "age", ErrorCode.INVALID_AGE),
            ({"age": 151}, "age", ErrorCode.INVALID_AGE),
            ({"example_id": ""}, "id", ErrorCode.INVALID_ID),
        ],
    )
    def test_invalid_fields_are_rejected(
        self, overrides: dict, field: str, code: ErrorCode
    ) -> None:
        with pytest.raises(ExampleValidationError) as exc_info:
            _example(**overrides)

        assert exc_info.value.field == field
        assert exc_info.value.code == code

    def test_boolean_age_is_rejected(self) -> None:
        with pytest.raises(ExampleValidationError):
            _example(age=True)


class TestUpdate:
    def test_update_replaces_fields_and_advances_updated_at(self) -> None:
        example = _example()

        example.update("Jane Doe", "jane@example.com", 31)

        assert (example.name, example.email, example.age) == ("Jane Doe", "jane@example.com", 31)
        assert example.created_at == NOW
        assert example.updated_at > NOW

    def test_rejected_update_leaves_instance_unchanged(self) -> None:
        example = _example()
        before = example.copy()

        with pytest.raises(ExampleValidationError):
            example.update("Jane Doe", "jane@example.com", 200)

        assert example == before

    def test_updated_at_strictly_increases_on_rapid_updates(self) -> None:
        example = Example.create("ex_1", "John Doe", "john@example.com", 30)
        seen = [example.updated_at]

        for age in range(31, 41):
            example.update("John Doe", "john@example.com", age)
            seen.append(example.updated_at)

        assert all(later > earlier for earlier, later in zip(seen, seen[1:], strict=False))

    def test_touch_moves_past_previous_timestamp(self) -> None:
        example = _example()
        future = datetime(2030, 1, 1, tzinfo=UTC)

        example.touch(future)

        assert example.updated_at > future


class TestHelpers:
    def test_next_timestamp_is_strictly_greater(self) -> None:
        future = datetime(2100, 1, 1, tzinfo=UTC)
        assert next_timestamp(future) > future

    def test_copy_does_not_alias(self) -> None:
        example = _example()
        clone = example.copy()

        clone.name = "Other Name"

        assert example.name == "John Doe"

    def test_restore_normalizes_naive_datetimes_to_utc(self) -> None:
        naive = datetime(2026, 1, 1, 12, 0)
        restored = Example.restore("ex_1", "John Doe", "john@example.com", 30, naive, naive)

        assert restored.created_at.tzinfo is UTC

    def test_to_dict_serializes_timestamps(self) -> None:
        data = _example().to_dict()

        assert data["created_at"] == NOW.isoformat()
        assert set(data) == {"id", "name", "email", "age", "created_at", "updated_at"}

    def test_mask_email(self) -> None:
        assert mask_email("john@example.com") == "jo***@example.com"
        assert mask_email("invalid") == "***"
