"""Implementações do colaborador externo (mock e HTTP)."""

from app.infra.external.http_external_api import HttpExternalExampleAPI
from app.infra.external.mock_external_api import MockExternalExampleAPI

__all__ = ["HttpExternalExampleAPI", "MockExternalExampleAPI"]
