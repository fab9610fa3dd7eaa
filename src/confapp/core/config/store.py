"""
Layered value store.

Each key resolves through four sources, highest priority first:

1. values set explicitly (command-line flags, ``write``)
2. environment variables ``<PREFIX>_<NAME>`` with ``.`` replaced by ``_``
3. the parsed config file
4. the default registered with the field

Environment variables are read at lookup time, so changes to the
environment are visible without reloading.
"""

from __future__ import annotations

import os
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Mapping, Optional, Tuple

from confapp.core.utils.logger import (
    log_configuration_change,
    log_debug,
    log_warning,
)
from confapp.core.utils.paths import ENV_PREFIX, env_var_name

from .coercion import check_type, coerce, format_value, to_serializable, zero_value
from .errors import (
    ConfigSaveError,
    ConfigStateError,
    FieldValidationError,
    UnknownFieldError,
)
from .fields import FIELD_FLAG_CONFIG, FLAG_FIELDS
from .persistence import load_config_file, save_config_atomic
from .registry import Field, FieldRegistry, FieldType
from .validation import validate, validate_config

SourceLabel = Literal["override", "env", "file", "default", "unset"]


class StoreState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class ValueStore:
    """Resolved configuration values for one process."""

    def __init__(
        self,
        registry: FieldRegistry,
        env_prefix: str = ENV_PREFIX,
        flag_fields: Iterable[Field] = FLAG_FIELDS,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.registry = registry
        self.env_prefix = env_prefix
        self._flag_fields = {field.name: field for field in flag_fields}
        self._environ = environ
        self._overrides: Dict[str, Any] = {}
        self._file_values: Dict[str, Any] = {}
        self._defaults: Dict[str, Any] = {}
        self.state = StoreState.UNINITIALIZED

    # -- lifecycle ---------------------------------------------------------

    def init(self, config_file: Optional[str] = None) -> None:
        """
        Seed defaults, resolve and validate the config file path, load it.

        Args:
            config_file: Config file path given explicitly (e.g. by flag).
                When omitted the path resolves through the environment and
                the ``config`` field default.

        Raises:
            ConfigStateError: If the store was already initialised
            FieldValidationError: If the config file path is not acceptable
            ConfigLoadError: If the file exists but cannot be read or parsed
        """
        if self.state is not StoreState.UNINITIALIZED:
            raise ConfigStateError(f"store already {self.state.value}")
        self.state = StoreState.INITIALIZING

        for field in (*self._flag_fields.values(), *self.registry):
            default = field.resolve_default()
            if default is not None:
                self._defaults[field.name] = default

        if config_file is not None:
            self._overrides[FIELD_FLAG_CONFIG.name] = str(config_file)

        path = self.read(FIELD_FLAG_CONFIG.name)
        errors = validate(FIELD_FLAG_CONFIG, path)
        if errors:
            raise FieldValidationError(errors[0].field, errors[0].message)

        if path:
            loaded = load_config_file(path, self.registry.names())
            self._file_values = loaded or {}
            for key, key_errors in validate_config(
                self._coerced_file_values(), self.registry
            ).items():
                for error in key_errors:
                    log_warning("STORE", f"Invalid value in {path}: {error}")

        self.state = StoreState.READY
        log_debug("STORE", f"Configuration ready (config file: {path or 'none'})")

    def _require_ready(self, operation: str) -> None:
        if self.state is not StoreState.READY:
            raise ConfigStateError(
                f"cannot {operation} while store is {self.state.value}"
            )

    # -- lookup ------------------------------------------------------------

    @property
    def config_file(self) -> Optional[str]:
        path = self.read(FIELD_FLAG_CONFIG.name)
        return path or None

    def field(self, name: str) -> Optional[Field]:
        return self.registry.get(name) or self._flag_fields.get(name)

    def env_name(self, name: str) -> str:
        return env_var_name(name, self.env_prefix)

    def _env_value(self, name: str) -> Optional[str]:
        environ = os.environ if self._environ is None else self._environ
        value = environ.get(self.env_name(name))
        # An empty variable counts as unset.
        return value if value else None

    def _lookup(self, name: str) -> Tuple[Any, SourceLabel]:
        if name in self._overrides:
            return self._overrides[name], "override"
        env_value = self._env_value(name)
        if env_value is not None:
            return env_value, "env"
        if name in self._file_values:
            return self._file_values[name], "file"
        if name in self._defaults:
            return self._defaults[name], "default"
        return None, "unset"

    def _coerced_file_values(self) -> Dict[str, Any]:
        coerced = {}
        for key, value in self._file_values.items():
            field = self.field(key)
            coerced[key] = coerce(value, field) if field is not None else value
        return coerced

    def read(self, name: str) -> Any:
        """Resolve ``name``; None when no source provides a value."""
        value, _ = self._lookup(name)
        field = self.field(name)
        if field is None or value is None:
            return value
        return coerce(value, field)

    def source_of(self, name: str) -> SourceLabel:
        """Return which source currently provides the value of ``name``."""
        return self._lookup(name)[1]

    def _read_typed(self, name: str, field_type: FieldType) -> Any:
        value = self.read(name)
        if value is None:
            return zero_value(field_type)
        typed_field = Field(name=name, type=field_type)
        return check_type(coerce(value, typed_field), typed_field)

    def read_string(self, name: str) -> str:
        return self._read_typed(name, FieldType.STRING)

    def read_bool(self, name: str) -> bool:
        return self._read_typed(name, FieldType.BOOL)

    def read_int(self, name: str) -> int:
        return self._read_typed(name, FieldType.INT)

    def read_float(self, name: str) -> float:
        return float(self._read_typed(name, FieldType.FLOAT))

    def read_duration(self, name: str) -> timedelta:
        return self._read_typed(name, FieldType.DURATION)

    # -- mutation ----------------------------------------------------------

    def write(self, name: str, value: Any) -> Any:
        """
        Validate ``value`` and store it as the explicit value of ``name``.

        Returns the value as stored (coerced to the field's type).

        Raises:
            ConfigStateError: If the store is not ready
            UnknownFieldError: If ``name`` is not a registered field
            FieldValidationError: If the value fails the field's rules; the
                previously resolved value is left untouched
        """
        self._require_ready("write")
        field = self.registry.get(name)
        if field is None:
            raise UnknownFieldError(name)

        candidate = coerce(value, field)
        errors = validate(field, candidate)
        if errors:
            raise FieldValidationError(errors[0].field, errors[0].message)
        if candidate is not None and not field.type.accepts(candidate):
            raise FieldValidationError(
                field.name, f"expected {field.type} value, got {value!r}"
            )

        if field.deprecated:
            log_warning("STORE", f"{field.name} is deprecated: {field.deprecated}")

        old_value = self.read(name)
        self._overrides[name] = candidate
        log_configuration_change(name, format_value(old_value), format_value(candidate))
        return candidate

    def settings(self) -> Dict[str, Any]:
        """Resolved values of every known key, flag fields excluded."""
        keys = list(self.registry.names())
        for key in (*self._file_values, *self._overrides):
            if key not in keys:
                keys.append(key)
        resolved: Dict[str, Any] = {}
        for key in keys:
            if key in self._flag_fields:
                continue
            value = self.read(key)
            if value is not None:
                resolved[key] = value
        return resolved

    def save(self) -> Path:
        """
        Write the resolved configuration to the config file.

        Raises:
            ConfigStateError: If the store is not ready
            ConfigSaveError: If no config file is configured or writing fails
        """
        self._require_ready("save")
        path = self.config_file
        if not path:
            raise ConfigSaveError("no config file specified")
        document = {key: to_serializable(value) for key, value in self.settings().items()}
        return save_config_atomic(document, path)
