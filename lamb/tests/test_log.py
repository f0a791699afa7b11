import logging

import pytest

from lamb import log


@pytest.fixture
def fresh_logger(monkeypatch):
    monkeypatch.setattr(log, "_handler", None)
    logger = log.get_logger()
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    logger.setLevel(level)
    logger.handlers[:] = handlers


def test_configure_logging_reads_level_from_env(monkeypatch, fresh_logger):
    monkeypatch.setenv(log.LEVEL_ENV, "debug")

    assert log.configure_logging() is fresh_logger
    assert fresh_logger.level == logging.DEBUG


def test_configure_logging_falls_back_on_invalid_level(monkeypatch, fresh_logger):
    monkeypatch.setenv(log.LEVEL_ENV, "chatty")

    log.configure_logging()

    assert fresh_logger.level == logging.INFO


def test_configure_logging_prefers_explicit_level(monkeypatch, fresh_logger):
    monkeypatch.setenv(log.LEVEL_ENV, "DEBUG")

    log.configure_logging("warning")

    assert fresh_logger.level == logging.WARNING


def test_configure_logging_adds_handler_once(fresh_logger):
    before = len(fresh_logger.handlers)

    log.configure_logging(logging.ERROR)
    log.configure_logging(logging.INFO)

    assert len(fresh_logger.handlers) == before + 1
    assert fresh_logger.level == logging.INFO


def test_record_logger_keeps_caller_extra(caplog):
    adapter = log.RecordLogger(
        logging.getLogger("lamb.tests.adapter"), {"trigger": "s3"}
    )

    adapter.error("boom", extra={"error": {"message": "boom"}})

    record = caplog.records[-1]
    assert record.trigger == "s3"
    assert record.error == {"message": "boom"}
