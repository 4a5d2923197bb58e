"""Logging configuration for token-vault.

The HTTP service writes JSON lines tagged with a request id. The CLI writes
short text lines so warnings read well next to command output. Both go to
stderr; stdout carries only command output.

Vault modules name what happened with ``extra={"event": ...}``. Both
formats surface that name.
"""

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any, Optional, TextIO

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "token-vault"

JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Set by the API middleware for the duration of a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestContextFilter(logging.Filter):
    """Stamp each record with the current request id, or '-' outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class VaultJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with ``level``, ``timestamp`` and ``service`` keys.

    Records logged outside a request (startup, shutdown) carry no
    ``request_id`` key.
    """

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["level"] = log_record.pop("levelname", record.levelname)
        if "asctime" in log_record:
            log_record["timestamp"] = log_record.pop("asctime")
        log_record["service"] = SERVICE_NAME

        if getattr(record, "request_id", "-") == "-":
            log_record.pop("request_id", None)


class VaultTextFormatter(logging.Formatter):
    """One-line text records with the event name and request id appended.

    Example:
        WARNING token_vault.core.store: Persisted vault is unreadable, starting empty [event=vault_load_corrupt]
    """

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        event = getattr(record, "event", None)
        if event:
            line += f" [event={event}]"
        request_id = getattr(record, "request_id", "-")
        if request_id != "-":
            line += f" [request_id={request_id}]"
        return line


def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the root logger for the server or the CLI.

    Args:
        level: Log level name. Defaults to TOKEN_VAULT_LOG_LEVEL or INFO.
        json_format: JSON lines if True, text if False. Defaults to
            TOKEN_VAULT_LOG_FORMAT, which is ``json`` unless set to ``text``.
        stream: Destination stream (default: the current sys.stderr).
    """
    if level is None:
        level = os.getenv("TOKEN_VAULT_LOG_LEVEL", "INFO").upper()
    if json_format is None:
        json_format = os.getenv("TOKEN_VAULT_LOG_FORMAT", "json").lower() == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    if json_format:
        handler.setFormatter(VaultJsonFormatter(JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    else:
        handler.setFormatter(VaultTextFormatter())
    root_logger.addHandler(handler)

    # RequestLoggingMiddleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


def set_request_id(request_id: str) -> None:
    """Set the request ID for the current context."""
    request_id_var.set(request_id)
