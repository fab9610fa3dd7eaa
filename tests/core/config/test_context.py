import logging

import pytest

from confapp.core.config import ConfigContext, FieldValidationError, StoreState
from confapp.core.utils.logger import LOGGER_NAME, JsonFormatter


def test_create_builds_ready_context(config_path):
    context = ConfigContext.create(config_file=str(config_path))

    assert context.store.state is StoreState.READY
    assert context.store.registry is context.registry
    assert "log.level" in context.registry
    assert context.verbose is False


def test_create_with_custom_registry(sample_registry, config_path):
    context = ConfigContext.create(
        config_file=str(config_path), registry=sample_registry, configure_logging=False
    )
    assert context.registry is sample_registry
    assert context.store.read("workers") == 4


def test_create_rejects_bad_config_path(tmp_path):
    with pytest.raises(FieldValidationError):
        ConfigContext.create(config_file=str(tmp_path / "config.exe"))


def test_logging_follows_log_fields(config_path, tmp_path, monkeypatch):
    log_file = tmp_path / "app.log"
    monkeypatch.setenv("CONFAPP_LOG_LEVEL", "warn")
    monkeypatch.setenv("CONFAPP_LOG_OUTPUT", str(log_file))
    monkeypatch.setenv("CONFAPP_LOG_FORMAT", "json")

    ConfigContext.create(config_file=str(config_path))

    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.WARNING
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].baseFilename == str(log_file)
    assert isinstance(file_handlers[0].formatter, JsonFormatter)


def test_invalid_log_level_falls_back_to_default(config_path, monkeypatch):
    monkeypatch.setenv("CONFAPP_LOG_LEVEL", "loud")

    ConfigContext.create(config_file=str(config_path))

    assert logging.getLogger(LOGGER_NAME).level == logging.INFO
