"""Formatters do serviço.

`json` (padrão) emite um objeto por linha com os campos de LOG_FIELDS
mais tudo que vier em `extra`; `console` é texto para uso local.
"""

from __future__ import annotations

import logging
from typing import Literal

from pythonjsonlogger.json import JsonFormatter

LogFormat = Literal["json", "console"]

LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "user_id",
    "service",
)

RENAMED_FIELDS = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}

CONSOLE_FORMAT = (
    "%(asctime)s %(levelname)-8s [%(correlation_id)s|%(user_id)s] %(name)s: %(message)s"
)

ISO_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def create_json_formatter() -> JsonFormatter:
    """Formatter JSON.

    Exemplo:
        {"timestamp": "2026-02-02T10:30:00+0000", "level": "INFO",
         "logger": "app.services.example_service", "message": "example_created",
         "correlation_id": "c-1", "user_id": "u-9", "service": "example-api",
         "example_id": "ex_ab12"}
    """
    return JsonFormatter(
        " ".join(f"%({field})s" for field in LOG_FIELDS),
        datefmt=ISO_DATEFMT,
        rename_fields=RENAMED_FIELDS,
    )


def create_console_formatter() -> logging.Formatter:
    return logging.Formatter(CONSOLE_FORMAT, datefmt=ISO_DATEFMT)


def create_formatter(log_format: LogFormat) -> logging.Formatter:
    """Seleciona o formatter pelo valor de LOG_FORMAT."""
    if log_format == "console":
        return create_console_formatter()
    return create_json_formatter()
