"""Montagem do router raiz.

/health e /ready ficam fora do prefixo versionado (probes do orquestrador);
o CRUD vive em /api/v1/examples.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.examples import router as examples_router
from api.routes.health.router import router as health_router

API_V1_PREFIX = "/api/v1"
EXAMPLES_PREFIX = f"{API_V1_PREFIX}/examples"


def create_api_router() -> APIRouter:
    root = APIRouter()
    root.include_router(health_router, tags=["health"])
    root.include_router(examples_router, prefix=EXAMPLES_PREFIX, tags=["examples"])
    return root
