"""Factories de dependências: criação de implementações concretas.

Este módulo centraliza a criação de repositório, colaborador externo,
publisher de eventos e demais componentes a partir das settings.
`build_container()` monta o grafo completo usado pela API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, create_http_client
from app.infra.external import HttpExternalExampleAPI, MockExternalExampleAPI
from app.infra.i18n import Localizer
from app.infra.messaging import MemoryEventPublisher, RedisStreamEventPublisher
from app.infra.stores import MemoryExampleRepository, SqlExampleRepository
from app.services import BackgroundTaskRunner, ExampleService
from app.use_cases.examples import ExampleUseCase
from config.settings import (
    get_base_settings,
    get_database_settings,
    get_example_rules_settings,
    get_example_timeout_settings,
    get_external_api_settings,
    get_messaging_settings,
)

if TYPE_CHECKING:
    import httpx
    from redis.asyncio import Redis as AsyncRedis

    from app.protocols import (
        EventPublisherProtocol,
        ExampleRepositoryProtocol,
        ExternalExampleAPIProtocol,
    )
    from config.settings import (
        BaseSettings,
        DatabaseSettings,
        ExampleRulesSettings,
        ExampleTimeoutSettings,
        ExternalAPISettings,
        MessagingSettings,
    )

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Repository Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_example_repository(
    settings: DatabaseSettings | None = None,
    base: BaseSettings | None = None,
) -> ExampleRepositoryProtocol:
    """Cria repositório baseado na configuração.

    DB_BACKEND:
    - "memory": MemoryExampleRepository (dev/test)
    - "sql": SqlExampleRepository (DATABASE_URL)
    """
    settings = settings or get_database_settings()
    base = base or get_base_settings()

    if settings.backend == "sql":
        repository = SqlExampleRepository.from_settings(settings)
        logger.info(
            "example_repository_created",
            extra={"backend": "sql", "sqlite": settings.is_sqlite},
        )
        return repository

    if settings.backend == "memory":
        if base.environment not in ("development", "test"):
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": base.environment},
            )
        logger.info("example_repository_created", extra={"backend": "memory"})
        return MemoryExampleRepository()

    msg = f"DB_BACKEND inválido: {settings.backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# External API Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_external_api(
    settings: ExternalAPISettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ExternalExampleAPIProtocol:
    """Cria colaborador externo: mock quando EXTERNAL_API_ENABLE_MOCK, senão HTTP."""
    settings = settings or get_external_api_settings()

    if settings.enable_mock:
        logger.info(
            "external_api_created",
            extra={"backend": "mock", "delay_seconds": settings.mock_delay_seconds},
        )
        return MockExternalExampleAPI(
            should_fail=settings.mock_should_fail,
            delay_seconds=settings.mock_delay_seconds,
        )

    client = http_client or create_http_client(settings)
    logger.info("external_api_created", extra={"backend": "http"})
    return HttpExternalExampleAPI(settings, http_client=client)


# ──────────────────────────────────────────────────────────────────────────────
# Event Publisher Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_event_publisher(
    settings: MessagingSettings | None = None,
    redis_client: AsyncRedis | None = None,
) -> EventPublisherProtocol | None:
    """Cria publisher de eventos; None quando MQ_ENABLE_PRODUCER=false.

    MQ_BACKEND:
    - "memory": MemoryEventPublisher
    - "redis": RedisStreamEventPublisher (REDIS_URL)
    """
    settings = settings or get_messaging_settings()

    if not settings.enable_producer:
        logger.info("event_publisher_disabled")
        return None

    if settings.backend == "redis":
        publisher = RedisStreamEventPublisher(
            redis_client or create_async_redis_client(settings), settings
        )
        logger.info(
            "event_publisher_created",
            extra={"backend": "redis", "stream": settings.stream_name},
        )
        return publisher

    logger.info("event_publisher_created", extra={"backend": "memory"})
    return MemoryEventPublisher(routing_prefix=settings.routing_prefix)


# ──────────────────────────────────────────────────────────────────────────────
# Misc Factories
# ──────────────────────────────────────────────────────────────────────────────


def create_task_runner(timeouts: ExampleTimeoutSettings | None = None) -> BackgroundTaskRunner:
    timeouts = timeouts or get_example_timeout_settings()
    return BackgroundTaskRunner(
        max_concurrency=timeouts.max_background_tasks,
        default_timeout_seconds=timeouts.notification_timeout_seconds,
    )


def create_localizer(base: BaseSettings | None = None) -> Localizer:
    base = base or get_base_settings()
    return Localizer.from_directory(default_language=base.default_language)


# ──────────────────────────────────────────────────────────────────────────────
# Container
# ──────────────────────────────────────────────────────────────────────────────


@dataclass
class Container:
    """Grafo de dependências da API (guardado em `app.state.container`)."""

    repository: ExampleRepositoryProtocol
    external_api: ExternalExampleAPIProtocol
    service: ExampleService
    use_case: ExampleUseCase
    task_runner: BackgroundTaskRunner
    localizer: Localizer
    publisher: EventPublisherProtocol | None = None
    http_client: httpx.AsyncClient | None = None
    redis_client: AsyncRedis | None = None
    database: DatabaseSettings | None = None

    async def aclose(self, drain_timeout_seconds: float = 30.0) -> None:
        """Drena tasks e fecha recursos na ordem inversa da criação."""
        await self.task_runner.drain(drain_timeout_seconds)
        if self.publisher is not None:
            await self.publisher.close()
        if self.http_client is not None:
            await self.http_client.aclose()
        await self.repository.close()
        logger.info("container_closed")


def build_container(
    *,
    repository: ExampleRepositoryProtocol | None = None,
    external_api: ExternalExampleAPIProtocol | None = None,
    publisher: EventPublisherProtocol | None = None,
    rules: ExampleRulesSettings | None = None,
    timeouts: ExampleTimeoutSettings | None = None,
) -> Container:
    """Monta o container a partir das settings; componentes podem ser injetados."""
    base = get_base_settings()
    database = get_database_settings()
    external_settings = get_external_api_settings()
    rules = rules or get_example_rules_settings()
    timeouts = timeouts or get_example_timeout_settings()

    http_client = None
    if external_api is None:
        if not external_settings.enable_mock:
            http_client = create_http_client(external_settings)
        external_api = create_external_api(external_settings, http_client=http_client)

    repository = repository or create_example_repository(database, base)
    redis_client = None
    if publisher is None:
        messaging = get_messaging_settings()
        if messaging.enable_producer and messaging.backend == "redis":
            redis_client = create_async_redis_client(messaging)
        publisher = create_event_publisher(messaging, redis_client=redis_client)

    task_runner = create_task_runner(timeouts)
    service = ExampleService(repository, rules=rules)
    use_case = ExampleUseCase(service, external_api, task_runner, timeouts=timeouts)

    return Container(
        repository=repository,
        external_api=external_api,
        service=service,
        use_case=use_case,
        task_runner=task_runner,
        localizer=create_localizer(base),
        publisher=publisher,
        http_client=http_client,
        redis_client=redis_client,
        database=database,
    )
