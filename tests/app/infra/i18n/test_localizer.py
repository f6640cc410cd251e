"""Testes do Localizer (YAML + Accept-Language)."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.domain.errors import ErrorCode
from app.infra.i18n import LocalizationError, Localizer


@pytest.fixture(scope="module")
def localizer() -> Localizer:
    return Localizer.from_directory(default_language="en")


class TestBundledLocales:
    def test_every_error_code_is_translated(self, localizer: Localizer) -> None:
        assert localizer.languages == ["en", "pt"]
        for language in localizer.languages:
            for code in ErrorCode:
                assert localizer.localize(language, str(code)) != str(code), (language, code)

    def test_templates_are_rendered(self, localizer: Localizer) -> None:
        message = localizer.localize("pt", "corporate_email_underage", {"min_age": 18})

        assert message == "Contas corporativas exigem idade mínima de 18 anos"

    def test_missing_placeholder_uses_fallback(self, localizer: Localizer) -> None:
        assert localizer.localize("pt", "invalid_age", {}, fallback="raw") == "raw"

    def test_unknown_key_returns_fallback_or_key(self, localizer: Localizer) -> None:
        assert localizer.localize("pt", "nope", fallback="original") == "original"
        assert localizer.localize("pt", "nope") == "nope"

    def test_unsupported_language_uses_default(self, localizer: Localizer) -> None:
        assert localizer.localize("fr", "invalid_email") == localizer.localize("en", "invalid_email")


class TestAcceptLanguage:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (None, "en"),
            ("", "en"),
            ("pt-BR,pt;q=0.9,en;q=0.8", "pt"),
            ("fr-FR,en;q=0.5,pt;q=0.7", "pt"),
            ("fr, de", "en"),
            ("pt;q=abc, en;q=0.1", "en"),
        ],
    )
    def test_picks_highest_quality_supported(
        self, localizer: Localizer, header: str | None, expected: str
    ) -> None:
        assert localizer.parse_accept_language(header) == expected


class TestLoading:
    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(LocalizationError):
            Localizer.from_directory(tmp_path / "missing")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "en.yaml").write_text("key: [unclosed", encoding="utf-8")

        with pytest.raises(LocalizationError):
            Localizer.from_directory(tmp_path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "en.yaml").write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(LocalizationError):
            Localizer.from_directory(tmp_path)

    def test_custom_directory(self, tmp_path: Path) -> None:
        (tmp_path / "es.yaml").write_text('hello: "hola {name}"\n', encoding="utf-8")

        localizer = Localizer.from_directory(tmp_path, default_language="es")

        assert localizer.localize("es", "hello", {"name": "Ana"}) == "hola Ana"
        assert localizer.parse_accept_language("es-MX") == "es"
