"""Localização de mensagens de erro.

Traduções em YAML (um arquivo por idioma em `locales/`, nome = código ISO
de 2 letras). Chave = ErrorCode; valor = template com `{placeholder}`.

Uso:
    localizer = Localizer.from_directory(default_language="en")
    lang = localizer.parse_accept_language("pt-BR,pt;q=0.9")
    localizer.localize(lang, "invalid_age", {"min": 0, "max": 150})
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent / "locales"


class LocalizationError(Exception):
    """Erro ao carregar arquivos de tradução."""


class Localizer:
    """Resolve mensagens por idioma com fallback para o idioma padrão.

    Args:
        translations: Mapa idioma -> (chave -> template).
        default_language: Idioma usado quando o pedido não é suportado.
    """

    def __init__(self, translations: dict[str, dict[str, str]], default_language: str = "en") -> None:
        self._translations = translations
        self._default_language = default_language

    @classmethod
    def from_directory(
        cls,
        directory: Path = LOCALES_DIR,
        default_language: str = "en",
    ) -> Localizer:
        """Carrega todos os `*.yaml` do diretório.

        Raises:
            LocalizationError: Diretório ausente ou YAML inválido.
        """
        if not directory.is_dir():
            raise LocalizationError(f"Diretório de traduções não encontrado: {directory}")

        translations: dict[str, dict[str, str]] = {}
        for path in sorted(directory.glob("*.yaml")):
            language = path.stem[:2].lower()
            try:
                with path.open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise LocalizationError(f"YAML inválido: {path.name}") from exc
            if not isinstance(data, dict):
                raise LocalizationError(f"YAML deve ser um dicionário: {path.name}")
            translations[language] = {str(k): str(v) for k, v in data.items()}

        logger.debug(
            "translations_loaded",
            extra={"languages": sorted(translations), "default_language": default_language},
        )
        return cls(translations, default_language)

    @property
    def default_language(self) -> str:
        return self._default_language

    @property
    def languages(self) -> list[str]:
        return sorted(self._translations)

    def is_supported(self, language: str) -> bool:
        return language in self._translations

    def parse_accept_language(self, header: str | None) -> str:
        """Escolhe idioma suportado a partir do header Accept-Language.

        Percorre as opções em ordem de preferência (q) e usa a primeira
        suportada, comparando pelo código primário (`pt-BR` -> `pt`).
        """
        if not header:
            return self._default_language

        options: list[tuple[float, int, str]] = []
        for index, item in enumerate(header.split(",")):
            tag, _, params = item.strip().partition(";")
            quality = 1.0
            params = params.strip()
            if params.startswith("q="):
                try:
                    quality = float(params[2:])
                except ValueError:
                    quality = 0.0
            if tag:
                options.append((-quality, index, tag.split("-")[0].lower()))

        for _, _, language in sorted(options):
            if self.is_supported(language):
                return language
        return self._default_language

    def localize(
        self,
        language: str,
        key: str,
        data: dict[str, Any] | None = None,
        fallback: str | None = None,
    ) -> str:
        """Retorna mensagem traduzida.

        Sem tradução (ou com placeholders sem valor), devolve `fallback`
        quando informado; caso contrário a chave/template crus.
        """
        template = self._translations.get(language, {}).get(key)
        if template is None:
            template = self._translations.get(self._default_language, {}).get(key)
        if template is None:
            return fallback or key
        try:
            return template.format(**(data or {}))
        except (KeyError, IndexError, ValueError):
            return fallback or template
