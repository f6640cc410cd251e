"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (examples, health)
- Validação inicial de request (DTOs pydantic, query params)
- Delegação para use cases
- Respostas HTTP e erros localizados

Estrutura:
- routes/examples/: CRUD de Examples
- routes/health/: health checks e readiness
- errors.py: AppError -> status/corpo de erro
- middleware.py: correlation_id, user_id, idioma, latência

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
