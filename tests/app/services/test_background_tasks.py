"""Testes do BackgroundTaskRunner."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.services import BackgroundTaskRunner


class TestSpawn:
    @pytest.mark.asyncio
    async def test_spawn_runs_detached(self) -> None:
        runner = BackgroundTaskRunner()
        done = asyncio.Event()

        async def job() -> None:
            done.set()

        task = runner.spawn("job", job())
        await task

        assert done.is_set()
        assert runner.active_count == 0

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised_to_caller(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        runner = BackgroundTaskRunner()

        async def boom() -> None:
            raise ValueError("x")

        with caplog.at_level(logging.ERROR):
            task = runner.spawn("boom", boom())
            await asyncio.gather(task, return_exceptions=True)
            await asyncio.sleep(0)

        assert any(r.message == "background_task_failed" for r in caplog.records)
        assert runner.active_count == 0

    @pytest.mark.asyncio
    async def test_timeout_is_per_task(self) -> None:
        runner = BackgroundTaskRunner(default_timeout_seconds=5.0)

        task = runner.spawn("slow", asyncio.sleep(1), timeout_seconds=0.01)
        results = await asyncio.gather(task, return_exceptions=True)

        assert isinstance(results[0], TimeoutError)

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self) -> None:
        runner = BackgroundTaskRunner(max_concurrency=2)
        running = 0
        peak = 0

        async def job() -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        tasks = [runner.spawn(f"job-{i}", job()) for i in range(6)]
        await asyncio.gather(*tasks)

        assert peak == 2


class TestDrain:
    @pytest.mark.asyncio
    async def test_drain_without_tasks_returns(self) -> None:
        await BackgroundTaskRunner().drain(0.01)

    @pytest.mark.asyncio
    async def test_drain_waits_for_pending(self) -> None:
        runner = BackgroundTaskRunner()
        finished: list[str] = []

        async def job() -> None:
            await asyncio.sleep(0.01)
            finished.append("ok")

        runner.spawn("job", job())
        await runner.drain(1.0)

        assert finished == ["ok"]

    @pytest.mark.asyncio
    async def test_drain_cancels_overdue(self, caplog: pytest.LogCaptureFixture) -> None:
        runner = BackgroundTaskRunner()
        task = runner.spawn("stuck", asyncio.sleep(10))

        with caplog.at_level(logging.WARNING):
            await runner.drain(0.01)

        assert task.cancelled()
        assert any(r.message == "background_tasks_shutdown_cancelled" for r in caplog.records)
