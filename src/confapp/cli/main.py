"""
Typer-based CLI for confapp.

The root command accepts the global ``--config`` and ``--verbose`` flags and
records them for the subcommand, which resolves the config file (flag,
``CONFAPP_CONFIG`` or the per-user default), loads it, applies the logging
settings and works on the resulting :class:`ConfigContext`.

Usage Patterns:
1. ``confapp config list [PREFIX]...``
2. ``confapp config describe [PREFIX]...``
3. ``confapp config set --log.level debug``
"""

from typing import Optional

import typer

from confapp import __version__
from confapp.core.utils.logger import log_debug
from confapp.core.utils.paths import APP_NAME

from .config_commands import app as config_app
from .root_options import RootOptions, config_option, verbose_option

app = typer.Typer(
    name=APP_NAME,
    help="Application with structured, layered configuration.",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(config_app, name="config", help="Configuration management commands")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    config_file: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Application with structured, layered configuration."""
    ctx.obj = RootOptions(config_file=config_file, verbose=verbose)
    log_debug("CLI", f"Running {ctx.invoked_subcommand or 'no'} command")


def run() -> None:
    """Console script entry point."""
    app(prog_name=APP_NAME)


if __name__ == "__main__":
    run()
