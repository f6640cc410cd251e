"""Testes do publisher/consumer de Redis Streams contra FakeRedisStreams."""

from __future__ import annotations

import asyncio
import json

import pytest

from app.domain.events import EventType, ExampleEvent
from app.domain.example import Example
from app.infra.messaging import RedisStreamEventConsumer, RedisStreamEventPublisher
from config.settings import MessagingSettings
from tests.fakes.fake_redis_streams import FakeRedisStreams
from utils.errors import MessagingError, RedisConnectionError, RepositoryConnectionError

SETTINGS = MessagingSettings(
    backend="redis",
    redis_url="redis://localhost:6379/0",
    stream_name="examples-test",
    routing_prefix="example",
    max_stream_length=500,
    block_ms=5,
)


def _example() -> Example:
    return Example.create("ex_1", "John Doe", "john@example.com", 30)


class TestPublisher:
    @pytest.mark.asyncio
    async def test_xadd_fields_and_maxlen(self) -> None:
        redis = FakeRedisStreams()
        publisher = RedisStreamEventPublisher(redis, SETTINGS)

        await publisher.publish_created(_example())

        (message_id, fields), = redis.streams["examples-test"]
        assert message_id == "1-1"
        assert fields["_type"] == str(EventType.EXAMPLE_CREATED)
        assert fields["routing_key"] == f"example.{EventType.EXAMPLE_CREATED}"
        assert json.loads(fields["_data"])["payload"]["email"] == "john@example.com"
        assert redis.xadd_calls == [
            {"name": "examples-test", "maxlen": 500, "approximate": True}
        ]

    @pytest.mark.asyncio
    async def test_connection_failure_raises_messaging_error(self) -> None:
        redis = FakeRedisStreams()
        redis.go_down()
        publisher = RedisStreamEventPublisher(redis, SETTINGS)

        with pytest.raises(RedisConnectionError) as exc_info:
            await publisher.publish_deleted("ex_1", "john@example.com", "John Doe")

        assert isinstance(exc_info.value, MessagingError)

    @pytest.mark.asyncio
    async def test_close_closes_client(self) -> None:
        redis = FakeRedisStreams()

        await RedisStreamEventPublisher(redis, SETTINGS).close()

        assert redis.closed


class TestConsumer:
    @pytest.mark.asyncio
    async def test_round_trip_through_group(self) -> None:
        redis = FakeRedisStreams()
        received: list[ExampleEvent] = []

        async def on_created(event: ExampleEvent) -> None:
            received.append(event)

        consumer = RedisStreamEventConsumer(
            redis, {EventType.EXAMPLE_CREATED: on_created}, SETTINGS
        )
        await consumer.ensure_group()
        await consumer.ensure_group()
        await RedisStreamEventPublisher(redis, SETTINGS).publish_created(_example())

        read = await consumer.poll_once()

        assert read == 1
        assert received[0].payload.id == "ex_1"
        assert redis.acked == ["1-1"]
        assert consumer.processed == 1

    @pytest.mark.asyncio
    async def test_unknown_and_malformed_messages_are_acked(self) -> None:
        redis = FakeRedisStreams()
        consumer = RedisStreamEventConsumer(redis, {}, SETTINGS)

        assert await consumer.process_message("1-1", {"_type": "other.thing", "_data": "{}"})
        assert await consumer.process_message(
            b"1-2", {b"_type": str(EventType.EXAMPLE_CREATED).encode(), b"_data": b"not json"}
        )

        assert redis.acked == ["1-1", b"1-2"]
        assert consumer.processed == 0

    @pytest.mark.asyncio
    async def test_retryable_failure_stays_pending(self) -> None:
        redis = FakeRedisStreams()

        async def flaky(event: ExampleEvent) -> None:
            raise RepositoryConnectionError("db down")

        consumer = RedisStreamEventConsumer(redis, {EventType.EXAMPLE_CREATED: flaky}, SETTINGS)
        event = ExampleEvent.created(_example())

        acked = await consumer.process_message(
            "1-1", {"_type": str(event.type), "_data": event.to_json()}
        )

        assert acked is False
        assert redis.acked == []

    @pytest.mark.asyncio
    async def test_handler_bug_is_acked(self) -> None:
        redis = FakeRedisStreams()

        async def broken(event: ExampleEvent) -> None:
            raise KeyError("x")

        consumer = RedisStreamEventConsumer(redis, {EventType.EXAMPLE_UPDATED: broken}, SETTINGS)
        event = ExampleEvent.updated(_example())

        assert await consumer.process_message(
            "1-1", {"_type": str(event.type), "_data": event.to_json()}
        )
        assert redis.acked == ["1-1"]

    @pytest.mark.asyncio
    async def test_run_stops_on_request(self) -> None:
        redis = FakeRedisStreams()
        consumer = RedisStreamEventConsumer(redis, {}, SETTINGS)

        task = asyncio.create_task(consumer.run())
        await asyncio.sleep(0.01)
        consumer.stop()
        await asyncio.wait_for(task, timeout=1.0)

        await consumer.close()
        assert redis.closed
