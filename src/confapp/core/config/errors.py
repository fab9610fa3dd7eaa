"""Exceptions raised by the configuration layer."""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for configuration errors."""


class FieldValidationError(ConfigError):
    """A value failed the constraints declared by its field."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class UnknownFieldError(ConfigError, KeyError):
    """No field with the given name is registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"unknown configuration field: {self.name}"


class ConfigTypeError(ConfigError, TypeError):
    """A stored value does not have the type its accessor expects."""

    def __init__(self, field: str, expected: str, value: object):
        self.field = field
        self.expected = expected
        self.value = value
        super().__init__(
            f"{field}: expected {expected}, got {type(value).__name__} ({value!r})"
        )


class ConfigLoadError(ConfigError):
    """The config file exists but could not be read or parsed."""


class UnsupportedFormatError(ConfigLoadError):
    """The config file extension does not name a supported format."""


class ConfigSaveError(ConfigError):
    """The configuration could not be written to disk."""


class ConfigStateError(ConfigError):
    """An operation was attempted in the wrong store lifecycle state."""
