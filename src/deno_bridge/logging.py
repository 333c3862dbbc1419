"""Logging configuration with structured JSON output.

Modules log dict events, ``logger.debug({"event": "binary_resolved", ...})``.
The formatter lifts ``event`` into ``msg`` and keeps the remaining keys, plus
anything passed as ``extra={"data": ...}``, under ``data``.
"""

import json
import logging
import sys
from typing import Any, Dict

LOGGER_NAME = "deno_bridge"

RESET = "\033[0m"
LEVEL_COLORS = {
    "DEBUG": "\033[34m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m\033[1m",
    "CRITICAL": "\033[35m\033[1m",
}


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {}
        if isinstance(record.msg, dict):
            data.update(record.msg)
            msg = str(data.pop("event", ""))
        else:
            msg = record.getMessage()

        if isinstance(getattr(record, "data", None), dict):
            data.update(record.data)

        output = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": msg,
        }
        if data:
            output["data"] = data
        if record.exc_info:
            output["exc"] = self.formatException(record.exc_info)

        line = json.dumps(output, default=str)
        if not self.color:
            return line
        return f"{LEVEL_COLORS.get(record.levelname, '')}{line}{RESET}"


def configure_logging(level: int = logging.DEBUG) -> None:
    """Send package events to stderr as JSON; repeat calls are no-ops."""
    app_logger = logging.getLogger(LOGGER_NAME)

    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter(color=sys.stderr.isatty()))
        handler.setLevel(level)

        app_logger.setLevel(level)
        app_logger.addHandler(handler)
        app_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
