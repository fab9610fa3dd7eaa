"""Validation utilities for configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .duration import parse_duration
from .formats import SUPPORTED_EXTENSIONS, extension_of
from .registry import Field, FieldRegistry


@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class TagRule:
    """A named structural rule usable in ``Field.validate_tag``."""

    name: str
    description: str
    check: Callable[[Any], bool]


_url_adapter = TypeAdapter(AnyUrl)


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _is_filepath(value: Any) -> bool:
    if not isinstance(value, str) or "\x00" in value:
        return False
    return not os.path.isdir(value)


TAG_RULES: Dict[str, TagRule] = {
    "url": TagRule("url", "must be an absolute URL", _is_url),
    "filepath": TagRule(
        "filepath", "must be a file path, not a directory", _is_filepath
    ),
}


def _check_tags(field: Field, value: Any) -> Optional[ValidationError]:
    # An empty string clears a tagged field rather than violating it.
    if value == "":
        return None
    for name in (part.strip() for part in field.validate_tag.split(",")):
        if not name:
            continue
        rule = TAG_RULES.get(name)
        if rule is None:
            return ValidationError(field.name, f"unknown validation rule '{name}'")
        if not rule.check(value):
            return ValidationError(field.name, f"{value!r} {rule.description}")
    return None


def validate(field: Field, value: Any) -> List[ValidationError]:
    """
    Check ``value`` against the constraints declared by ``field``.

    Rules are applied in order: absent values always pass, an allowed-value
    set decides on its own, then tag rules, then the custom predicate.
    Returns an empty list when the value is acceptable.
    """
    if value is None:
        return []

    if field.valid_values:
        if value in field.valid_values:
            return []
        allowed = ", ".join(str(item) for item in field.valid_values)
        return [ValidationError(field.name, f"valid values: {allowed}")]

    if field.validate_tag:
        error = _check_tags(field, value)
        if error is not None:
            return [error]

    if field.validate_func is not None:
        try:
            field.validate_func(value)
        except (ValueError, TypeError) as exc:
            return [ValidationError(field.name, str(exc))]

    return []


def validate_config(
    dotmap: Dict[str, Any], registry: FieldRegistry
) -> Dict[str, List[ValidationError]]:
    """Validate a flattened config document and return errors keyed by dotpath."""
    fields = registry.lookup_by_name()
    errors: Dict[str, List[ValidationError]] = {}
    for key, value in dotmap.items():
        field = fields.get(key)
        if field is None:
            continue
        field_errors = validate(field, value)
        if field_errors:
            errors[key] = field_errors
    return errors


def validate_config_file(value: Any) -> None:
    """Accept config file paths whose extension names a supported format."""
    if not isinstance(value, str):
        raise TypeError("config file path must be a string")
    if value == "":
        return
    ext = extension_of(value)
    if not ext:
        raise ValueError("config file must have an extension")
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"unsupported file extension: {ext} "
            f"(supported: {', '.join(SUPPORTED_EXTENSIONS)})"
        )


def validate_duration(value: Any) -> None:
    """Accept a number of seconds or a duration expression such as ``1h30m``."""
    if isinstance(value, bool):
        raise TypeError("duration must be a string or numeric value")
    if isinstance(value, (int, float, timedelta)):
        return
    if isinstance(value, str):
        if value == "":
            return
        try:
            float(value.strip())
            return
        except ValueError:
            pass
        try:
            parse_duration(value)
        except ValueError:
            raise ValueError(
                f"invalid duration format: {value} (examples: 1h30m, 15m, 10s)"
            ) from None
        return
    raise TypeError("duration must be a string or numeric value")
