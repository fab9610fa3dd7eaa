"""Field descriptors and the ordered field registry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from confapp.core.utils.paths import ENV_PREFIX, env_var_name


class FieldType(str, Enum):
    """Declared value type of a configuration field."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DURATION = "duration"

    @property
    def python_type(self) -> type:
        return _PYTHON_TYPES[self]

    def accepts(self, value: Any) -> bool:
        """Return True if ``value`` is a valid stored value of this type."""
        if self is FieldType.BOOL:
            return isinstance(value, bool)
        if self is FieldType.INT:
            return isinstance(value, int) and not isinstance(value, bool)
        if self is FieldType.FLOAT:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        return isinstance(value, self.python_type)

    def __str__(self) -> str:
        return self.value


_PYTHON_TYPES = {
    FieldType.STRING: str,
    FieldType.BOOL: bool,
    FieldType.INT: int,
    FieldType.FLOAT: float,
    FieldType.DURATION: timedelta,
}


@dataclass(frozen=True)
class Field:
    """Metadata describing a config field."""

    name: str
    type: FieldType = FieldType.STRING
    group: str = ""
    default: Any = None
    description: str = ""
    docstring: str = ""
    example: str = ""
    hidden: bool = False
    shorthand: str = ""
    valid_values: Optional[Tuple[Any, ...]] = None
    validate_tag: str = ""  # comma separated rule names, e.g. "url"
    validate_func: Optional[Callable[[Any], None]] = None
    deprecated: str = ""  # replacement hint, empty when current
    default_factory: Optional[Callable[[], Any]] = None

    def env_name(self, prefix: str = ENV_PREFIX) -> str:
        return env_var_name(self.name, prefix)

    def resolve_default(self) -> Any:
        """The default value, computed now when the field has a factory."""
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


class FieldRegistry:
    """
    Ordered collection of fields, unique by name.

    Registration order is preserved for selection; display views sort
    explicitly. Adding a field whose name is already registered replaces
    the existing entry at its position.
    """

    def __init__(self, fields: Iterable[Field] = ()):
        self._fields: List[Field] = []
        self.add(*fields)

    def add(self, *fields: Field) -> None:
        for field in fields:
            for index, existing in enumerate(self._fields):
                if existing.name == field.name:
                    self._fields[index] = field
                    break
            else:
                self._fields.append(field)

    def by_prefix(self, prefixes: Optional[Iterable[str]] = None) -> List[Field]:
        """Return fields whose name starts with any of ``prefixes``, in registry order."""
        wanted = list(prefixes or [])
        if not wanted:
            return list(self._fields)
        return [
            field
            for field in self._fields
            if any(field.name.startswith(prefix) for prefix in wanted)
        ]

    def grouped_sorted(
        self, fields: Optional[Iterable[Field]] = None
    ) -> List[Tuple[str, List[Field]]]:
        """Group fields by group name, both levels sorted for stable output."""
        groups: Dict[str, List[Field]] = {}
        for field in self._fields if fields is None else fields:
            groups.setdefault(field.group, []).append(field)
        return [
            (group, sorted(groups[group], key=lambda f: f.name))
            for group in sorted(groups)
        ]

    def lookup_by_name(self) -> Dict[str, Field]:
        return {field.name: field for field in self._fields}

    def get(self, name: str) -> Optional[Field]:
        for field in self._fields:
            if field.name == name:
                return field
        return None

    def names(self) -> List[str]:
        return [field.name for field in self._fields]

    def __contains__(self, name: object) -> bool:
        return self.get(name) is not None if isinstance(name, str) else False

    def __iter__(self) -> Iterator[Field]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldRegistry({self.names()!r})"


def flatten(nested: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested dict to dotpath map."""
    items: Dict[str, Any] = {}
    for key, value in nested.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            items.update(flatten(value, full_key))
        else:
            items[full_key] = value
    return items


def unflatten(dotmap: Dict[str, Any]) -> Dict[str, Any]:
    """Convert dotpath map to nested dict."""
    nested: Dict[str, Any] = {}
    for key, value in dotmap.items():
        parts = key.split(".")
        cursor = nested
        for part in parts[:-1]:
            if part not in cursor or not isinstance(cursor[part], dict):
                cursor[part] = {}
            cursor = cursor[part]
        cursor[parts[-1]] = value
    return nested
