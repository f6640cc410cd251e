"""Testes do ExampleUseCase (enriquecimento paralelo, validação, notificação)."""

from __future__ import annotations

import asyncio
import logging
import time

import pytest

from app.domain.errors import ExternalServiceError, NotFoundError, ValidationRejectedError
from app.infra.external import MockExternalExampleAPI
from app.infra.stores import MemoryExampleRepository
from app.services import BackgroundTaskRunner, ExampleService
from app.use_cases.examples import (
    CreateExampleRequest,
    ExampleUseCase,
    ListExamplesRequest,
    UpdateExampleRequest,
)
from config.settings import ExampleTimeoutSettings
from tests.fakes.fake_external_api import FakeExternalExampleAPI

EXTERNAL_TIMEOUT = 0.05
JOHN = CreateExampleRequest(name="John Doe", email="john@example.com", age=30)


def _build(
    api: FakeExternalExampleAPI | None = None,
) -> tuple[ExampleUseCase, MemoryExampleRepository, FakeExternalExampleAPI, BackgroundTaskRunner]:
    repository = MemoryExampleRepository()
    external_api = api or FakeExternalExampleAPI()
    runner = BackgroundTaskRunner()
    use_case = ExampleUseCase(
        ExampleService(repository),
        external_api,
        runner,
        ExampleTimeoutSettings(
            external_call_timeout_seconds=EXTERNAL_TIMEOUT,
            notification_timeout_seconds=1.0,
        ),
    )
    return use_case, repository, external_api, runner


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_does_not_wait_for_notification(self) -> None:
        use_case, repository, api, runner = _build()
        api.configure("notify_created", delay_seconds=0.2)

        started = time.perf_counter()
        result = await use_case.create_example(JOHN)
        elapsed = time.perf_counter() - started

        assert elapsed < 0.1
        assert await repository.count() == 1
        assert runner.active_count == 1
        assert api.notified == []

        await runner.drain(1.0)
        assert api.notified == [(result.example.id, "john@example.com")]

    @pytest.mark.asyncio
    async def test_notification_failure_is_only_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        use_case, repository, api, runner = _build()
        api.fail("notify_created")

        with caplog.at_level(logging.WARNING):
            result = await use_case.create_example(JOHN)
            await runner.drain(1.0)

        assert result.example.email == "john@example.com"
        assert await repository.count() == 1
        assert any(r.message == "external_notify_failed" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_caller_cancellation_does_not_drop_write_or_notification(self) -> None:
        use_case, repository, api, runner = _build()

        task = asyncio.create_task(use_case.create_example(JOHN))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        await asyncio.sleep(0.01)
        await runner.drain(1.0)
        assert await repository.count() == 1
        assert len(api.notified) == 1


class TestValidateAndCreate:
    @pytest.mark.asyncio
    async def test_rejected_writes_nothing(self) -> None:
        use_case, repository, api, _ = _build(FakeExternalExampleAPI(validate_result=False))

        with pytest.raises(ValidationRejectedError) as exc_info:
            await use_case.validate_and_create_example(JOHN)

        assert await repository.count() == 0
        assert exc_info.value.template_data == {"name": "John Doe", "email": "john@example.com"}
        assert "notify_created" not in api.call_names()

    @pytest.mark.asyncio
    async def test_validation_failure_is_external_error(self) -> None:
        api = FakeExternalExampleAPI()
        api.fail("validate")
        use_case, repository, _, _ = _build(api)

        with pytest.raises(ExternalServiceError) as exc_info:
            await use_case.validate_and_create_example(JOHN)

        assert "John Doe" in str(exc_info.value)
        assert "john@example.com" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None
        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_validation_timeout_is_external_error(self) -> None:
        api = FakeExternalExampleAPI()
        api.configure("validate", delay_seconds=1.0)
        use_case, repository, _, _ = _build(api)

        with pytest.raises(ExternalServiceError):
            await use_case.validate_and_create_example(JOHN)

        assert api.cancelled == ["validate"]
        assert await repository.count() == 0

    @pytest.mark.asyncio
    async def test_success_enriches_and_notifies(self) -> None:
        use_case, _, api, runner = _build()

        result = await use_case.validate_and_create_example(JOHN)
        await runner.drain(1.0)

        assert result.enrichment == {"external_id": f"ext_{result.example.id}", "tier": "gold"}
        assert api.call_names()[0] == "validate"
        assert len(api.notified) == 1

    @pytest.mark.asyncio
    async def test_enrichment_failure_keeps_created_record(self) -> None:
        api = FakeExternalExampleAPI()
        api.fail("enrich")
        use_case, repository, _, _ = _build(api)

        result = await use_case.validate_and_create_example(JOHN)

        assert result.enrichment is None
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_created_record_carries_external_data_and_enrichment(self) -> None:
        use_case, _, api, _ = _build()

        result = await use_case.validate_and_create_example(JOHN)

        assert result.external_data is not None
        assert result.external_data.external_id == f"ext_{result.example.id}"
        assert result.enrichment is not None
        assert {"fetch_data", "enrich"} <= set(api.call_names())

    @pytest.mark.asyncio
    async def test_fetch_failure_keeps_enrichment(self) -> None:
        api = FakeExternalExampleAPI()
        api.fail("fetch_data")
        use_case, repository, _, _ = _build(api)

        result = await use_case.validate_and_create_example(JOHN)

        assert result.external_data is None
        assert result.enrichment is not None
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_matches_later_read_with_mock_backend(self) -> None:
        runner = BackgroundTaskRunner()
        use_case = ExampleUseCase(
            ExampleService(MemoryExampleRepository()),
            MockExternalExampleAPI(delay_seconds=0),
            runner,
            ExampleTimeoutSettings(notification_timeout_seconds=1.0),
        )

        created = await use_case.validate_and_create_example(JOHN)
        fetched = await use_case.get_example(created.example.id)
        await runner.drain(1.0)

        assert created.external_data is not None
        assert fetched.external_data is not None
        assert created.external_data.external_id == fetched.external_data.external_id
        assert created.enrichment == fetched.enrichment


class TestEnrichment:
    @pytest.mark.asyncio
    async def test_calls_are_dispatched_together(self) -> None:
        api = FakeExternalExampleAPI()
        api.configure("fetch_data", delay_seconds=0.01)
        api.configure("enrich", delay_seconds=0.01)
        use_case, _, _, runner = _build(api)
        created = await use_case.create_example(JOHN)
        await runner.drain(1.0)

        result = await use_case.get_example(created.example.id)

        assert api.max_in_flight == 2
        assert result.external_data is not None
        assert result.enrichment is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["fetch_data", "enrich"])
    async def test_one_failure_keeps_the_other_result(self, failing: str) -> None:
        api = FakeExternalExampleAPI()
        api.fail(failing)
        use_case, _, _, _ = _build(api)
        created = await use_case.create_example(JOHN)

        result = await use_case.get_example(created.example.id)

        if failing == "fetch_data":
            assert result.external_data is None
            assert result.enrichment is not None
        else:
            assert result.external_data is not None
            assert result.enrichment is None

    @pytest.mark.asyncio
    async def test_slow_call_does_not_discard_fast_one(self) -> None:
        api = FakeExternalExampleAPI()
        api.configure("enrich", delay_seconds=1.0)
        use_case, _, _, _ = _build(api)
        created = await use_case.create_example(JOHN)

        result = await use_case.get_example_by_email("john@example.com")

        assert result.example.id == created.example.id
        assert result.external_data is not None
        assert result.enrichment is None
        assert "enrich" in api.cancelled

    @pytest.mark.asyncio
    async def test_deadline_is_shared(self) -> None:
        api = FakeExternalExampleAPI()
        api.configure("fetch_data", delay_seconds=1.0)
        api.configure("enrich", delay_seconds=1.0)
        use_case, _, _, _ = _build(api)
        created = await use_case.create_example(JOHN)

        started = time.perf_counter()
        result = await use_case.get_example(created.example.id)
        elapsed = time.perf_counter() - started

        assert elapsed < EXTERNAL_TIMEOUT * 4
        assert result.external_data is None
        assert result.enrichment is None
        assert sorted(api.cancelled) == ["enrich", "fetch_data"]

    @pytest.mark.asyncio
    async def test_update_returns_enriched_record(self) -> None:
        use_case, _, _, _ = _build()
        created = await use_case.create_example(JOHN)

        result = await use_case.update_example(
            created.example.id,
            UpdateExampleRequest(name="John Smith", email="smith@example.com", age=31),
        )

        assert result.example.name == "John Smith"
        assert result.enrichment is not None

    @pytest.mark.asyncio
    async def test_get_missing_raises_before_external_calls(self) -> None:
        use_case, _, api, _ = _build()

        with pytest.raises(NotFoundError):
            await use_case.get_example("ex_missing")

        assert api.calls == []


class TestListAndDelete:
    @pytest.mark.asyncio
    async def test_list_enriches_each_item_sequentially(self) -> None:
        api = FakeExternalExampleAPI()
        use_case, _, _, runner = _build(api)
        for index in range(3):
            await use_case.create_example(
                CreateExampleRequest(name="User", email=f"u{index}@example.com", age=20)
            )
        await runner.drain(1.0)
        api.calls.clear()
        api.configure("fetch_data", delay_seconds=0.005)
        api.configure("enrich", delay_seconds=0.005)
        api.max_in_flight = 0

        page = await use_case.list_examples(ListExamplesRequest(limit=2, offset=0))

        assert [item.example.email for item in page.examples] == [
            "u2@example.com",
            "u1@example.com",
        ]
        assert page.total == 3
        assert page.has_next is True
        assert page.has_prev is False
        assert page.total_pages == 2
        assert api.max_in_flight == 2
        assert api.call_names().count("fetch_data") == 2

    @pytest.mark.asyncio
    async def test_list_item_failure_returns_bare_item(self) -> None:
        api = FakeExternalExampleAPI()
        use_case, _, _, _ = _build(api)
        await use_case.create_example(JOHN)
        api.fail("fetch_data")
        api.fail("enrich")

        page = await use_case.list_examples(ListExamplesRequest(limit=0, offset=-3))

        assert page.limit == 10
        assert page.offset == 0
        assert page.examples[0].external_data is None
        assert page.examples[0].enrichment is None

    @pytest.mark.asyncio
    async def test_delete_returns_removed_record(self) -> None:
        use_case, repository, _, _ = _build()
        created = await use_case.create_example(JOHN)

        removed = await use_case.delete_example(created.example.id)

        assert removed.id == created.example.id
        assert await repository.count() == 0
