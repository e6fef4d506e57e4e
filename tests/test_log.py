"""Tests for logging setup."""

import json
import logging
import sys

import pytest

from anonimizador.log import PACKAGE_LOGGER, JsonFormatter, configure_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_json_formatter():
    record = logging.LogRecord("anonimizador.engine", logging.DEBUG, __file__, 1, "anonymized %d spans", (3,), None)
    entry = json.loads(JsonFormatter().format(record))
    assert entry == {"level": "debug", "logger": "anonimizador.engine", "message": "anonymized 3 spans"}


def test_json_formatter_includes_error():
    try:
        raise ValueError("bad settings")
    except ValueError:
        record = logging.LogRecord("anonimizador.server", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    entry = json.loads(JsonFormatter().format(record))
    assert "ValueError: bad settings" in entry["error"]


def test_level_from_prefixed_env(monkeypatch, package_logger):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("ANONIMIZADOR_LOG_LEVEL", "debug")
    configure_logging()
    assert package_logger.level == logging.DEBUG


def test_default_level_is_warning(monkeypatch, package_logger):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ANONIMIZADOR_LOG_LEVEL", raising=False)
    configure_logging()
    assert package_logger.level == logging.WARNING


def test_reconfiguring_replaces_handler(monkeypatch, package_logger):
    monkeypatch.setenv("LOG_FORMAT", "json")
    configure_logging("INFO")
    configure_logging("INFO")
    ours = [h for h in package_logger.handlers if h.get_name() == PACKAGE_LOGGER]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JsonFormatter)
