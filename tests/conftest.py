"""
Shared pytest fixtures and configuration for confapp tests.

This module provides common fixtures used across the test suite: an
environment without ``CONFAPP_*`` variables, a clean logger between tests,
small field registries and ready-to-use value stores.
"""

import os
import sys
from datetime import timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

# Put `src/` first so `import confapp` uses workspace code.
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from confapp.core.config import Field, FieldRegistry, FieldType, ValueStore  # noqa: E402
from confapp.core.config.validation import validate_duration  # noqa: E402
from confapp.core.utils.logger import reset_logging  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Drop CONFAPP_* variables and keep the per-user config dir inside tmp_path."""
    for key in list(os.environ.keys()):
        if key.startswith("CONFAPP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    yield


@pytest.fixture(autouse=True)
def isolated_logging():
    """Reset the global logger so handlers never outlive a test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def typer_test_client() -> CliRunner:
    """CliRunner for invoking the Typer application."""
    return CliRunner()


@pytest.fixture
def log_level_field() -> Field:
    return Field(
        name="log.level",
        group="Application",
        type=FieldType.STRING,
        default="info",
        description="The log level to use for the application.",
        valid_values=("debug", "info", "warn", "error"),
    )


@pytest.fixture
def sample_registry(log_level_field) -> FieldRegistry:
    """A registry covering every field type."""
    return FieldRegistry(
        [
            log_level_field,
            Field(name="log.output", group="Application", validate_tag="filepath"),
            Field(name="workers", group="Runtime", type=FieldType.INT, default=4),
            Field(name="ratio", group="Runtime", type=FieldType.FLOAT, default=0.5),
            Field(name="update.auto", group="Application", type=FieldType.BOOL, default=False),
            Field(
                name="update.period",
                group="Application",
                type=FieldType.DURATION,
                default=timedelta(minutes=15),
                validate_func=validate_duration,
            ),
            Field(name="proxy.http", group="Network", validate_tag="url"),
            Field(name="secret", group="Application", default="s3cr3t", hidden=True),
        ]
    )


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "confapp" / "config.yaml"


@pytest.fixture
def ready_store(sample_registry, config_path) -> ValueStore:
    """A store initialised against a (not yet existing) YAML config file."""
    store = ValueStore(sample_registry)
    store.init(str(config_path))
    return store
