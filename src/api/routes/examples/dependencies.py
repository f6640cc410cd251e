"""Dependências FastAPI das rotas de Examples (lidas de `app.state.container`)."""

from __future__ import annotations

from fastapi import Request

from app.bootstrap import Container
from app.use_cases.examples import ExampleUseCase


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_use_case(request: Request) -> ExampleUseCase:
    return get_container(request).use_case
