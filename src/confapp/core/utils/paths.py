import os
from pathlib import Path

import typer

APP_NAME = "confapp"

# Environment variables are looked up as <ENV_PREFIX>_<FIELD_NAME>
ENV_PREFIX = "CONFAPP"

DEFAULT_CONFIG_FILENAME = "config.yaml"


def get_config_dir() -> Path:
    """Return the per-user configuration directory for the application."""
    return Path(typer.get_app_dir(APP_NAME))


def get_default_config_path() -> Path:
    """Return the config file used when neither flag nor environment names one."""
    return get_config_dir() / DEFAULT_CONFIG_FILENAME


def env_var_name(name: str, prefix: str = ENV_PREFIX) -> str:
    """Map a dot-delimited field name to its environment variable name."""
    key = name.replace(".", "_").upper()
    return f"{prefix}_{key}" if prefix else key


def ensure_parent_dir(path: Path) -> None:
    """Create the directory tree holding ``path`` if it does not exist."""
    parent = path.parent
    if not parent.exists():
        os.makedirs(parent, exist_ok=True)
