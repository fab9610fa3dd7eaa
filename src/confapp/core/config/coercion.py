"""Value coercion utilities for configuration loading."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from .duration import duration_from_seconds, format_duration, parse_duration
from .errors import ConfigTypeError
from .registry import Field, FieldType


def _coerce_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return value


def _coerce_int(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def _coerce_float(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


def _coerce_duration(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return duration_from_seconds(value)
        except (ValueError, OverflowError):
            return value
    if isinstance(value, str):
        trimmed = value.strip()
        try:
            return duration_from_seconds(float(trimmed))
        except (ValueError, OverflowError):
            pass
        try:
            return parse_duration(trimmed)
        except ValueError:
            return value
    return value


def _coerce_string(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


def coerce(raw: Any, field: Field) -> Any:
    """Coerce raw value to the field's type where possible."""
    if raw is None:
        return None
    target = field.type
    if target is FieldType.BOOL:
        return _coerce_bool(raw)
    if target is FieldType.INT:
        return _coerce_int(raw)
    if target is FieldType.FLOAT:
        return _coerce_float(raw)
    if target is FieldType.DURATION:
        return _coerce_duration(raw)
    return _coerce_string(raw)


def check_type(value: Any, field: Field) -> Any:
    """Return ``value`` if it is stored as the field's type, else raise."""
    if not field.type.accepts(value):
        raise ConfigTypeError(field.name, str(field.type), value)
    return value


def zero_value(field_type: FieldType) -> Any:
    """The value a typed read yields for an unset key."""
    return {
        FieldType.STRING: "",
        FieldType.BOOL: False,
        FieldType.INT: 0,
        FieldType.FLOAT: 0.0,
        FieldType.DURATION: timedelta(0),
    }[field_type]


def to_serializable(value: Any) -> Any:
    """Prepare a resolved value for a config file document."""
    if isinstance(value, timedelta):
        return format_duration(value)
    return value


def format_value(value: Any) -> str:
    """Render a resolved value for terminal output."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    return str(value)
