"""Configuration context owned by the process entry point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from confapp.core.utils.logger import log_warning, setup_logging
from confapp.core.utils.paths import ENV_PREFIX

from .fields import FIELD_LOG_FORMAT, FIELD_LOG_LEVEL, FIELD_LOG_OUTPUT, build_registry
from .registry import FieldRegistry
from .store import ValueStore


@dataclass
class ConfigContext:
    """
    Field registry and value store for one command invocation.

    Created once by the entry point and handed to every component that needs
    field metadata or resolved values.
    """

    registry: FieldRegistry
    store: ValueStore
    verbose: bool = False

    @classmethod
    def create(
        cls,
        config_file: Optional[str] = None,
        verbose: bool = False,
        registry: Optional[FieldRegistry] = None,
        env_prefix: str = ENV_PREFIX,
        configure_logging: bool = True,
    ) -> "ConfigContext":
        """
        Build the registry, initialise the store and apply logging settings.

        Raises:
            ConfigError: If the configuration cannot be initialised
        """
        registry = registry if registry is not None else build_registry()
        store = ValueStore(registry, env_prefix=env_prefix)
        store.init(config_file)
        context = cls(registry=registry, store=store, verbose=verbose)
        if configure_logging:
            context.apply_logging()
        return context

    def apply_logging(self) -> None:
        """Configure the application logger from the ``log.*`` fields."""
        level = self.store.read_string(FIELD_LOG_LEVEL.name) or "info"
        log_file = self.store.read_string(FIELD_LOG_OUTPUT.name) or None
        log_format = self.store.read_string(FIELD_LOG_FORMAT.name) or "text"
        try:
            setup_logging(level=level, log_file=log_file, log_format=log_format)
        except ValueError as exc:
            setup_logging(log_file=log_file, log_format=log_format)
            log_warning("CONFIG", f"Falling back to default log level: {exc}")
