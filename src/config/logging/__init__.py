"""Logging estruturado do serviço de Examples.

Todo record sai com timestamp, level, logger, message, correlation_id,
user_id e service; campos de `extra` são anexados ao JSON.
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import EmailRedactionFilter, RequestContextFilter, redact_email
from config.logging.formatters import (
    LOG_FIELDS,
    RENAMED_FIELDS,
    create_console_formatter,
    create_formatter,
    create_json_formatter,
)

__all__ = [
    "LOG_FIELDS",
    "RENAMED_FIELDS",
    "EmailRedactionFilter",
    "RequestContextFilter",
    "configure_logging",
    "create_console_formatter",
    "create_formatter",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
    "redact_email",
]
