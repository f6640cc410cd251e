"""Configuração do pytest para o serviço de Examples."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import clear_settings_cache  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Cada teste parte de settings limpas em ambiente `test`."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("EXTERNAL_API_MOCK_DELAY", "0")
    clear_settings_cache()
    yield
    clear_settings_cache()
