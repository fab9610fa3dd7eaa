"""
Config file formats, selected by file extension.

Every codec reads a document into a flat dot-path map and writes a dot-path
map back out. Nested formats (YAML, JSON, TOML, HCL) store dotted names as
nested tables; the dotenv format stores one ``UPPER_SNAKE`` key per field.
"""

from __future__ import annotations

import io
import json
import os
import tomllib
from typing import Any, Callable, Dict, Iterable, Optional

import tomlkit
import yaml
from dotenv import dotenv_values

from . import hcl
from .errors import UnsupportedFormatError
from .registry import flatten, unflatten

SUPPORTED_EXTENSIONS = ("yaml", "yml", "json", "toml", "hcl", "env")


def extension_of(path: str | os.PathLike[str]) -> str:
    """Lower-cased extension of ``path`` without the leading dot."""
    return os.path.splitext(os.fspath(path))[1].lower().lstrip(".")


def format_for(path: str | os.PathLike[str]) -> str:
    """Return the codec name for ``path`` or raise for unsupported extensions."""
    ext = extension_of(path)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"unsupported config file extension '{ext}' for {os.fspath(path)} "
            f"(supported: {', '.join(SUPPORTED_EXTENSIONS)})"
        )
    return "yaml" if ext == "yml" else ext


# --- YAML -----------------------------------------------------------------


def _load_yaml(text: str) -> Dict[str, Any]:
    return yaml.safe_load(text) or {}


def _dump_yaml(nested: Dict[str, Any]) -> str:
    return yaml.safe_dump(nested, sort_keys=False, allow_unicode=True)


# --- JSON -----------------------------------------------------------------


def _load_json(text: str) -> Dict[str, Any]:
    if not text.strip():
        return {}
    return json.loads(text)


def _dump_json(nested: Dict[str, Any]) -> str:
    return json.dumps(nested, indent=2, ensure_ascii=False) + "\n"


# --- TOML -----------------------------------------------------------------


def _load_toml(text: str) -> Dict[str, Any]:
    return tomllib.loads(text)


def _dump_toml(nested: Dict[str, Any]) -> str:
    doc = tomlkit.document()
    # Scalars must precede tables in a TOML document.
    for key, value in nested.items():
        if not isinstance(value, dict):
            doc[key] = value
    for key, value in nested.items():
        if isinstance(value, dict):
            doc[key] = value
    return tomlkit.dumps(doc)


# --- dotenv ---------------------------------------------------------------


def env_file_key(name: str) -> str:
    return name.replace(".", "_").upper()


def _load_env(text: str) -> Dict[str, Any]:
    values = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return {key: value for key, value in values.items() if value is not None}


def _dump_env(dotmap: Dict[str, Any]) -> str:
    lines = []
    for name, value in dotmap.items():
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        else:
            rendered = str(value)
        escaped = rendered.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'{env_file_key(name)}="{escaped}"')
    return "\n".join(lines) + "\n"


_LOADERS: Dict[str, Callable[[str], Dict[str, Any]]] = {
    "yaml": _load_yaml,
    "json": _load_json,
    "toml": _load_toml,
    "hcl": hcl.loads,
    "env": _load_env,
}

_DUMPERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "yaml": _dump_yaml,
    "json": _dump_json,
    "toml": _dump_toml,
    "hcl": hcl.dumps,
}


def loads(
    text: str, fmt: str, known_names: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """
    Parse ``text`` in format ``fmt`` into a dot-path map.

    Args:
        text: Document contents
        fmt: Codec name as returned by :func:`format_for`
        known_names: Registered field names, used to map dotenv keys
                     back to dotted names

    Raises:
        ValueError: If the document is not a mapping at the top level
        Any parser error of the underlying library
    """
    document = _LOADERS[fmt](text)
    if not isinstance(document, dict):
        raise ValueError(f"expected a mapping at the top level, got {type(document).__name__}")
    if fmt != "env":
        return flatten(document)

    by_env_key = {env_file_key(name): name for name in known_names or ()}
    return {
        by_env_key.get(key.upper(), key.lower()): value
        for key, value in document.items()
    }


def dumps(dotmap: Dict[str, Any], fmt: str) -> str:
    """Render a dot-path map in format ``fmt``."""
    if fmt == "env":
        return _dump_env(dotmap)
    return _DUMPERS[fmt](unflatten(dotmap))
