"""Internacionalização de mensagens de erro."""

from app.infra.i18n.localizer import LOCALES_DIR, LocalizationError, Localizer

__all__ = ["LOCALES_DIR", "LocalizationError", "Localizer"]
