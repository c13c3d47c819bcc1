"""Tests for structlog configuration."""

from __future__ import annotations

import logging

import pytest
import structlog

from aigos.logging import SERVICE_NAME, _add_service, _level_number, configure_logging


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    quiet = {name: logging.getLogger(name).level for name in ("httpx", "anthropic")}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, lvl in quiet.items():
        logging.getLogger(name).setLevel(lvl)
    structlog.reset_defaults()


def test_level_names_resolve():
    assert _level_number("debug") == logging.DEBUG
    assert _level_number("WARNING") == logging.WARNING
    assert _level_number("verbose") == logging.INFO


def test_service_field_added_once():
    assert _add_service(None, "info", {"event": "x"})["service"] == SERVICE_NAME
    assert _add_service(None, "info", {"service": "worker"})["service"] == "worker"


def test_configure_sets_root_and_quiets_http_clients(restore_logging):
    configure_logging(log_level="DEBUG", log_format="json")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("anthropic").level == logging.WARNING


def test_quiet_loggers_follow_stricter_root(restore_logging):
    configure_logging(log_level="ERROR")
    assert logging.getLogger("httpx").level == logging.ERROR
