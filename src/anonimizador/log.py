"""Logging for the ``anonimizador`` command and sidecar.

Only the ``anonimizador`` logger tree is configured; the host
application's root logger is left alone. Records carry counts and
category names only, never the text being anonymized.
"""

from __future__ import annotations

import json
import logging
import os

PACKAGE_LOGGER = "anonimizador"
DEFAULT_LEVEL = "WARNING"
PLAIN_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shippers reading the sidecar's stderr."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)
        return json.dumps(entry, ensure_ascii=False)


def _env(name: str, default: str) -> str:
    # ANONIMIZADOR_LOG_LEVEL wins over the generic LOG_LEVEL
    return os.getenv(f"ANONIMIZADOR_{name}") or os.getenv(name) or default


def _make_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%H:%M:%S"))
    handler.set_name(PACKAGE_LOGGER)
    return handler


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger and set its level.

    ``level`` falls back to ``$ANONIMIZADOR_LOG_LEVEL``, then ``$LOG_LEVEL``,
    then WARNING. ``LOG_FORMAT=json`` (or the prefixed variant) switches to
    JSON lines. Calling it again replaces the handler instead of adding one.
    """
    if level is None:
        level = _env("LOG_LEVEL", DEFAULT_LEVEL)
    if isinstance(level, str):
        level = level.strip().upper()

    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in [h for h in logger.handlers if h.get_name() == PACKAGE_LOGGER]:
        logger.removeHandler(old)
    logger.addHandler(_make_handler(_env("LOG_FORMAT", "plain").lower()))
    logger.setLevel(level)
    return logger
