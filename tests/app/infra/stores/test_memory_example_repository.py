"""Testes do MemoryExampleRepository."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from app.domain.errors import AlreadyExistsError
from app.domain.example import Example
from app.infra.stores import MemoryExampleRepository
from app.protocols.example_repository import ExampleAlreadyExistsError, ExampleNotFoundError
from app.services import ExampleService

T0 = datetime(2024, 1, 1, tzinfo=UTC)


def _example(example_id: str, email: str, *, minutes: int = 0) -> Example:
    return Example.create(example_id, "John Doe", email, 30, now=T0 + timedelta(minutes=minutes))


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_and_get_round_trip(self) -> None:
        repo = MemoryExampleRepository()
        example = _example("ex_1", "john@example.com")

        await repo.create(example)

        assert await repo.get_by_id("ex_1") == example
        assert await repo.get_by_email("john@example.com") == example

    @pytest.mark.asyncio
    async def test_returned_copies_do_not_alias_storage(self) -> None:
        repo = MemoryExampleRepository()
        example = _example("ex_1", "john@example.com")
        await repo.create(example)

        example.name = "Mutated"
        fetched = await repo.get_by_id("ex_1")
        fetched.age = 99

        assert (await repo.get_by_id("ex_1")).name == "John Doe"
        assert (await repo.get_by_id("ex_1")).age == 30

    @pytest.mark.asyncio
    async def test_duplicate_id_or_email_is_rejected(self) -> None:
        repo = MemoryExampleRepository()
        await repo.create(_example("ex_1", "john@example.com"))

        with pytest.raises(ExampleAlreadyExistsError) as by_id:
            await repo.create(_example("ex_1", "other@example.com"))
        with pytest.raises(ExampleAlreadyExistsError) as by_email:
            await repo.create(_example("ex_2", "john@example.com"))

        assert by_id.value.field == "id"
        assert by_email.value.field == "email"
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_missing_records_raise_not_found(self) -> None:
        repo = MemoryExampleRepository()

        with pytest.raises(ExampleNotFoundError):
            await repo.get_by_id("ex_404")
        with pytest.raises(ExampleNotFoundError):
            await repo.get_by_email("nobody@example.com")
        with pytest.raises(ExampleNotFoundError):
            await repo.delete("ex_404")
        with pytest.raises(ExampleNotFoundError):
            await repo.update(_example("ex_404", "a@example.com"))

    @pytest.mark.asyncio
    async def test_update_keeps_created_at_and_reindexes_email(self) -> None:
        repo = MemoryExampleRepository()
        original = _example("ex_1", "john@example.com")
        await repo.create(original)

        changed = original.copy()
        changed.email = "new@example.com"
        changed.created_at = T0 + timedelta(days=1)
        stored = await repo.update(changed)

        assert stored.created_at == T0
        assert stored.updated_at > original.updated_at
        assert (await repo.get_by_email("new@example.com")).id == "ex_1"
        with pytest.raises(ExampleNotFoundError):
            await repo.get_by_email("john@example.com")

    @pytest.mark.asyncio
    async def test_update_to_other_email_fails_without_changes(self) -> None:
        repo = MemoryExampleRepository()
        await repo.create(_example("ex_1", "john@example.com"))
        await repo.create(_example("ex_2", "jane@example.com"))

        changed = await repo.get_by_id("ex_1")
        changed.email = "jane@example.com"
        with pytest.raises(ExampleAlreadyExistsError):
            await repo.update(changed)

        assert (await repo.get_by_id("ex_1")).email == "john@example.com"

    @pytest.mark.asyncio
    async def test_delete_frees_email(self) -> None:
        repo = MemoryExampleRepository()
        await repo.create(_example("ex_1", "john@example.com"))

        await repo.delete("ex_1")
        await repo.create(_example("ex_2", "john@example.com"))

        assert await repo.count() == 1


class TestList:
    @pytest.mark.asyncio
    async def test_newest_first_with_offset(self) -> None:
        repo = MemoryExampleRepository()
        for index in range(5):
            await repo.create(_example(f"ex_{index}", f"u{index}@example.com", minutes=index))

        page = await repo.list(2, 1)

        assert [example.id for example in page] == ["ex_3", "ex_2"]

    @pytest.mark.asyncio
    async def test_ties_break_by_insertion_order(self) -> None:
        repo = MemoryExampleRepository()
        for index in range(3):
            await repo.create(_example(f"ex_{index}", f"u{index}@example.com"))

        assert [example.id for example in await repo.list(10, 0)] == ["ex_2", "ex_1", "ex_0"]

    @pytest.mark.asyncio
    async def test_offset_past_end_is_empty(self) -> None:
        repo = MemoryExampleRepository()
        await repo.create(_example("ex_1", "john@example.com"))

        assert await repo.list(10, 5) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_size", [1, 4, 7, 23, 50])
    async def test_paging_through_every_offset_returns_each_record_once(
        self, page_size: int
    ) -> None:
        repo = MemoryExampleRepository()
        for index in range(23):
            await repo.create(_example(f"ex_{index}", f"u{index}@example.com", minutes=index % 5))

        seen: list[str] = []
        for offset in range(0, 23, page_size):
            page = await repo.list(page_size, offset)
            assert len(page) == min(page_size, 23 - offset)
            seen.extend(example.id for example in page)

        assert len(seen) == 23
        assert len(set(seen)) == 23
        assert await repo.count() == 23
        assert await repo.list(page_size, 23) == []


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_creates_with_same_email_yield_one_record(self) -> None:
        repo = MemoryExampleRepository()
        service = ExampleService(repo)

        results = await asyncio.gather(
            *(service.create_example("John Doe", "john@example.com", 30) for _ in range(10)),
            return_exceptions=True,
        )

        successes = [r for r in results if isinstance(r, Example)]
        conflicts = [r for r in results if isinstance(r, AlreadyExistsError)]
        assert len(successes) == 1
        assert len(conflicts) == 9
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_parallel_readers_from_threads(self) -> None:
        repo = MemoryExampleRepository()
        await repo.create(_example("ex_1", "john@example.com"))

        results = await asyncio.gather(
            *(asyncio.to_thread(repo._get_by_id_sync, "ex_1") for _ in range(20))
        )

        assert {example.id for example in results} == {"ex_1"}
