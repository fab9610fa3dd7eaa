"""Field registry, validation and layered value resolution."""

from .context import ConfigContext
from .duration import format_duration, parse_duration
from .errors import (
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
    ConfigStateError,
    ConfigTypeError,
    FieldValidationError,
    UnknownFieldError,
    UnsupportedFormatError,
)
from .fields import FLAG_FIELDS, build_registry
from .registry import Field, FieldRegistry, FieldType, flatten, unflatten
from .store import StoreState, ValueStore
from .validation import (
    ValidationError,
    validate,
    validate_config,
    validate_config_file,
    validate_duration,
)

__all__ = [
    "ConfigContext",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSaveError",
    "ConfigStateError",
    "ConfigTypeError",
    "FLAG_FIELDS",
    "Field",
    "FieldRegistry",
    "FieldType",
    "FieldValidationError",
    "StoreState",
    "UnknownFieldError",
    "UnsupportedFormatError",
    "ValidationError",
    "ValueStore",
    "build_registry",
    "flatten",
    "format_duration",
    "parse_duration",
    "unflatten",
    "validate",
    "validate_config",
    "validate_config_file",
    "validate_duration",
]
