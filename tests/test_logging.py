"""
Tests for logging setup.
"""
import logging

import pytest
import structlog

from munin_protocol.config import Settings, get_settings
from munin_protocol.logging import setup_logging


@pytest.fixture
def restore_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def test_file_handler_writes_component_log(tmp_path, restore_logging):
    config = Settings(log_dir=tmp_path, log_to_file=True, log_level="DEBUG")

    setup_logging("shell", config=config)

    assert (tmp_path / "shell.log").exists()
    assert logging.getLogger().level == logging.DEBUG


def test_stream_only_by_default(tmp_path, restore_logging):
    config = Settings(log_dir=tmp_path / "logs")

    setup_logging("shell", config=config)

    assert not (tmp_path / "logs").exists()


def test_level_defaults_to_environment(monkeypatch, restore_logging):
    monkeypatch.setenv("MUNIN_PROTOCOL_LOG_LEVEL", "warning")
    get_settings.cache_clear()
    try:
        setup_logging("shell")
    finally:
        get_settings.cache_clear()

    assert logging.getLogger().level == logging.WARNING
