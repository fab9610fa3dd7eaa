"""Config file persistence utilities."""

from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from confapp.core.utils.logger import log_debug, log_file_operation, log_warning
from confapp.core.utils.paths import ensure_parent_dir

from . import formats
from .errors import ConfigLoadError, ConfigSaveError


def load_config_file(
    config_path: Path | str, known_names: Iterable[str] = ()
) -> Optional[Dict[str, Any]]:
    """
    Read a config file into a dot-path map.

    Returns None when the file does not exist. Any other failure, whether
    reading or parsing, raises :class:`ConfigLoadError`.
    """
    path = Path(config_path)
    fmt = formats.format_for(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log_debug("PERSISTENCE", f"Config file {path} not found, using defaults")
        return None
    except OSError as exc:
        log_file_operation("read", str(path), False, str(exc))
        raise ConfigLoadError(f"failed to read config file {path}: {exc}") from exc

    try:
        dotmap = formats.loads(text, fmt, known_names)
    except Exception as exc:
        log_file_operation("parse", str(path), False, str(exc))
        raise ConfigLoadError(f"failed to parse config file {path}: {exc}") from exc

    log_file_operation("read", str(path), True)
    return dotmap


def _drop_shadowed_keys(dotmap: Dict[str, Any]) -> Dict[str, Any]:
    """Remove keys that are also the parent of another dotted key."""
    parents = set()
    for key in dotmap:
        parts = key.split(".")
        for i in range(1, len(parts)):
            parents.add(".".join(parts[:i]))

    kept = {}
    for key, value in dotmap.items():
        if key in parents:
            log_warning(
                "PERSISTENCE",
                f"Dropping value for {key!r}: it is the parent of other configuration keys",
            )
            continue
        kept[key] = value
    return kept


def save_config_atomic(dotmap: Dict[str, Any], target_path: Path | str) -> Path:
    """
    Write ``dotmap`` to ``target_path`` in the format implied by its extension.

    Missing parent directories are created. The document is written to a
    temporary sibling first and then moved over the target. A key that is
    also the parent of other keys is dropped with a warning, except in the
    flat env format.
    """
    target = Path(target_path)
    fmt = formats.format_for(target)
    if fmt != "env":
        dotmap = _drop_shadowed_keys(dotmap)
    payload = formats.dumps(dotmap, fmt)
    temp_path = target.with_name(f".{target.name}.tmp")
    try:
        ensure_parent_dir(target)
        temp_path.write_text(payload, encoding="utf-8")
        os.replace(temp_path, target)
    except OSError as exc:
        log_file_operation("write", str(target), False, str(exc))
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise ConfigSaveError(f"failed to write config file {target}: {exc}") from exc

    log_file_operation("write", str(target), True)
    return target
