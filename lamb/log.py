"""Logging setup shared by the Lambda entry points."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, MutableMapping

LOGGER_NAME = "lamb"
LEVEL_ENV = "LAMB_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_handler: logging.Handler | None = None


def _load_level(env_key: str, fallback: str) -> int:
    raw = os.environ.get(env_key) or fallback
    level = logging.getLevelName(raw.strip().upper())
    if isinstance(level, int):
        return level
    return logging.getLevelName(fallback)


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if level:
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved
        return logging.getLevelName(DEFAULT_LEVEL)
    return _load_level(LEVEL_ENV, DEFAULT_LEVEL)


def get_logger() -> logging.Logger:
    """Return the package logger used when no logger is injected."""

    return logging.getLogger(LOGGER_NAME)


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Meant to run once at cold start. Calling it again only updates the level.
    """

    global _handler

    log = get_logger()
    log.setLevel(_resolve_level(level))
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_FORMAT))
        log.addHandler(_handler)
    return log


class RecordLogger(logging.LoggerAdapter):
    """Adds trigger fields to every record while keeping caller ``extra``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs
