"""
Options shared by the root command and every config subcommand.

``--config/-c`` and ``--verbose/-v`` may be given before or after the
subcommand name. The root callback records its values in a
:class:`RootOptions` object; a subcommand merges them with its own and
builds the :class:`ConfigContext` only then, so both placements take effect
before the configuration is loaded.
"""

from dataclasses import dataclass
from typing import Optional

import typer
from rich.console import Console

from confapp.core.config import ConfigContext, ConfigError
from confapp.core.config.fields import FIELD_FLAG_CONFIG, FIELD_FLAG_VERBOSE
from confapp.core.utils.paths import APP_NAME, DEFAULT_CONFIG_FILENAME

from .exit_codes import CliExit

console = Console(highlight=False)


@dataclass
class RootOptions:
    config_file: Optional[str] = None
    verbose: bool = False


def config_option():
    return typer.Option(
        None,
        "--config",
        "-c",
        help=FIELD_FLAG_CONFIG.description,
        show_default=f"<user config dir>/{APP_NAME}/{DEFAULT_CONFIG_FILENAME}",
    )


def verbose_option():
    return typer.Option(
        False,
        "--verbose",
        "-v",
        help=FIELD_FLAG_VERBOSE.description,
    )


def load_context(
    ctx: typer.Context, config_file: Optional[str] = None, verbose: bool = False
) -> ConfigContext:
    """
    Initialise configuration for a subcommand.

    Flags given after the subcommand win over the same flags given before it.

    Raises:
        CliExit: If the configuration cannot be initialised
    """
    root = ctx.find_object(RootOptions) or RootOptions()
    if config_file is None:
        config_file = root.config_file

    try:
        context = ConfigContext.create(config_file=config_file)
        context.verbose = (
            verbose or root.verbose or context.store.read_bool(FIELD_FLAG_VERBOSE.name)
        )
    except ConfigError as exc:
        raise CliExit.error(f"Configuration error: {exc}")

    if context.verbose:
        path = context.store.config_file
        if path:
            console.print(f"# Using config file: {path}", markup=False, soft_wrap=True)
        else:
            console.print("# No config file found, using default values", markup=False)
    return context
