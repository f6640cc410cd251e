"""Processo consumidor de eventos de Example (Redis Streams).

Uso:
    python -m app.consumer

Encerra com SIGINT/SIGTERM após terminar o lote em andamento.
"""

from __future__ import annotations

import asyncio
import signal

from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client
from app.coordinators.events.handler import ExampleEventHandler
from app.infra.messaging import RedisStreamEventConsumer
from config.logging import get_logger
from config.settings import get_messaging_settings

logger = get_logger(__name__)


async def run_consumer() -> None:
    settings = get_messaging_settings()
    handler = ExampleEventHandler()
    consumer = RedisStreamEventConsumer(
        create_async_redis_client(settings),
        handler.handlers(),
        settings,
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, consumer.stop)

    try:
        await consumer.run()
    finally:
        await consumer.close()
        logger.info("consumer_shutdown", extra={"processed": consumer.processed})


def main() -> None:
    initialize_app()
    validate_runtime_settings()
    asyncio.run(run_consumer())


if __name__ == "__main__":
    main()
