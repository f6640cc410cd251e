"""Entrypoint da API de Examples.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from api.routes.errors import register_exception_handlers
from api.routes.middleware import register_middleware
from app.bootstrap import build_container, initialize_app, validate_runtime_settings
from app.infra.stores import SqlExampleRepository
from config.logging import get_logger
from config.settings import get_base_settings, get_server_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.bootstrap import Container

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Monta o container (se não injetado) e aplica schema SQL

    Shutdown:
    - Drena tasks em background (notificações, eventos)
    - Fecha publisher, clientes e repositório
    """
    base = get_base_settings()
    logger.info("app_starting", extra={"service": base.service_name, "environment": base.environment})
    validate_runtime_settings()

    if getattr(app.state, "container", None) is None:
        app.state.container = build_container()
    container: Container = app.state.container

    database = container.database
    if (
        isinstance(container.repository, SqlExampleRepository)
        and (database is None or database.auto_migrate)
    ):
        await container.repository.migrate()

    yield

    logger.info("app_shutting_down", extra={"service": base.service_name})
    await container.aclose(get_server_settings().shutdown_timeout_seconds)


def create_app(container: Container | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        container: Dependências já montadas (testes); None monta no startup.

    Returns:
        Aplicação FastAPI configurada.
    """
    base = get_base_settings()
    server = get_server_settings()
    fastapi_app = FastAPI(
        title="Example API",
        description="CRUD de Examples com enriquecimento externo e eventos",
        version=base.version,
        lifespan=lifespan,
        docs_url=None if base.is_production else "/docs",
        redoc_url=None if base.is_production else "/redoc",
        openapi_url="/openapi.json",
        debug=base.debug,
    )
    fastapi_app.state.container = container

    register_middleware(fastapi_app)
    if server.enable_cors:
        fastapi_app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Content-Language", "X-Correlation-ID", "X-Request-ID"],
            max_age=86400,
        )
    register_exception_handlers(fastapi_app)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": base.service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    server = get_server_settings()
    logger.info("server_starting", extra={"host": server.host, "port": server.port})
    uvicorn.run(
        "app.app:app",
        host=server.host,
        port=server.port,
        reload=get_base_settings().environment == "development",
    )


if __name__ == "__main__":
    main()
