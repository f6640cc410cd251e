"""Rotas HTTP de Examples (`/api/v1/examples`)."""

from api.routes.examples.router import router

__all__ = ["router"]
