"""Logging helpers: named loggers plus an optional JSON line formatter."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

__all__ = ["JsonLineFormatter", "configure_logging", "get_logger"]

ROOT_LOGGER_NAME = "backend"
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; structured fields travel via ``extra=``."""

    return logging.getLogger(name)


class JsonLineFormatter(logging.Formatter):
    """Render each record as one JSON object including ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: Mapping[str, Any] | None = None) -> logging.Logger:
    """Attach a single stream handler to the service logger tree."""

    config = config or {}
    level_name = str(config.get("level", "INFO")).upper()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    for handler in list(logger.handlers):
        if getattr(handler, "_stream_atlas", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler._stream_atlas = True  # type: ignore[attr-defined]
    if config.get("json"):
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logger.addHandler(handler)
    return logger
