"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers

import pytest

from moneytrail.config import BaseConfig
from moneytrail.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture()
def config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> BaseConfig:
    monkeypatch.setenv("MONEYTRAIL_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("MONEYTRAIL_LOG_LEVEL", raising=False)
    return BaseConfig()


def test_json_formatter_includes_extra_fields():
    """JSONFormatter emits the standard keys plus anything passed via ``extra``."""
    formatter = JSONFormatter()

    record = logging.LogRecord(
        name="moneytrail.services.transactions",
        level=logging.INFO,
        pathname="transactions.py",
        lineno=42,
        msg="Transaction created",
        args=(),
        exc_info=None,
    )
    record.transaction_id = 7

    log_data = json.loads(formatter.format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "moneytrail.services.transactions"
    assert log_data["message"] == "Transaction created"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"transaction_id": 7}
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    """Exceptions are serialized with type, message and traceback."""
    formatter = JSONFormatter()

    try:
        raise ConnectionError("network unreachable")
    except ConnectionError:
        import sys

        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="moneytrail",
        level=logging.ERROR,
        pathname="submission.py",
        lineno=10,
        msg="Error submitting transaction",
        args=(),
        exc_info=exc_info,
    )

    log_data = json.loads(formatter.format(record))

    assert log_data["exception"]["type"] == "ConnectionError"
    assert "network unreachable" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_setup_logging_writes_json_file(config, tmp_path):
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "moneytrail"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    log_file = tmp_path / "logs" / "moneytrail.log"
    assert log_file.exists()

    get_logger("services.accounts").warning("Account missing", extra={"account_id": 3})
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "moneytrail.services.accounts"
    assert entries[-1]["extra"] == {"account_id": 3}


def test_setup_logging_does_not_stack_handlers(config):
    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger_namespaces_once():
    assert get_logger("module1").name == "moneytrail.module1"
    assert get_logger("moneytrail.services.submission").name == "moneytrail.services.submission"
    assert get_logger("moneytrail").name == "moneytrail"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_console_level_follows_dev_mode(config, dev_mode):
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    assert console.level == (logging.INFO if dev_mode else logging.WARNING)
