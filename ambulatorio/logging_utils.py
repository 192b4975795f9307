from __future__ import annotations

import contextvars
import json
import logging
import sys
from typing import Any

_request_id_ctx_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

_STANDARD_ATTRIBUTES = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "request_id",
}


class RequestContextFilter(logging.Filter):
    """Aggiunge l'id della richiesta HTTP corrente ai record di log."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx_var.get() or "-"
        return True


class JSONLogFormatter(logging.Formatter):
    """Serializza i record come JSON su una riga."""

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": record.__dict__.get("request_id"),
        }
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _STANDARD_ATTRIBUTES:
                continue
            log_entry[key] = value

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [req=%(request_id)s] %(message)s"

_configured = False


def configure_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Configura il root logger: un solo handler su stdout, testo o JSON."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLogFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    handler.addFilter(RequestContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.propagate = True

    _configured = True


def set_request_id(request_id: str | None) -> contextvars.Token:
    return _request_id_ctx_var.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx_var.reset(token)


def get_request_id() -> str:
    return _request_id_ctx_var.get() or "unknown"


__all__ = [
    "JSONLogFormatter",
    "RequestContextFilter",
    "configure_logging",
    "get_request_id",
    "reset_request_id",
    "set_request_id",
]
