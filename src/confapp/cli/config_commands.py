"""
CLI commands for configuration management.

``list`` and ``describe`` select fields by name prefix; ``set`` takes one
``--<field name> <value>`` option per field to change and saves the
configuration file when at least one field was changed.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from confapp.core.config import ConfigContext, ConfigError, Field, FieldType
from confapp.core.config.coercion import format_value

from .exit_codes import CliExit
from .root_options import config_option, load_context, verbose_option


console = Console(highlight=False)
app = typer.Typer(
    name="config",
    help="Configuration management commands",
    no_args_is_help=True,
)

_SET_EPILOG = """Examples:

  confapp config set --log.level info

  confapp config set --log.level debug --log.output /var/log/app.log

  confapp config set --update.auto true --update.period 1h

  confapp config set --proxy.http http://proxy:8080
"""


def _out(text: str = "", **kwargs) -> None:
    console.print(text, markup=False, soft_wrap=True, **kwargs)


def _select(context: ConfigContext, prefixes: Optional[List[str]]) -> List[Field]:
    selected = context.registry.by_prefix(prefixes)
    if not selected:
        raise CliExit.error("No configuration fields found")
    return selected


@app.command("list")
def list_config(
    ctx: typer.Context,
    prefixes: Optional[List[str]] = typer.Argument(
        None, metavar="[PREFIX]...", help="Only show fields starting with these prefixes"
    ),
    hidden: bool = typer.Option(False, "--hidden", help="Show hidden fields"),
    config_file: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
) -> None:
    """List configuration values."""
    context = load_context(ctx, config_file, verbose)
    selected = _select(context, prefixes)
    width = max(len(field.name) for field in selected)

    for field in selected:
        if field.hidden and not hidden:
            continue
        value = format_value(context.store.read(field.name))
        _out(f"{field.name:<{width + 1}} = {value}")


def _describe_field(context: ConfigContext, field: Field) -> None:
    if field.deprecated:
        _out(f"\n  {field.name} (deprecated: {field.deprecated})", style="bold")
    else:
        _out(f"\n  {field.name}", style="bold")

    _out(f"    {field.description}")
    _out(f"    Type: {field.type}")

    default = field.resolve_default()
    value = context.store.read(field.name)
    if value is not None and value != default:
        source = context.store.source_of(field.name)
        _out(f"    Value: {format_value(value)} (from {source})")

    if default is not None:
        _out(f"    Default: {format_value(default)}")
    if field.valid_values:
        _out(f"    Valid values: {format_value(field.valid_values)}")
    if field.validate_tag:
        _out(f"    Validation: {field.validate_tag}")
    _out(f"    Environment: {context.store.env_name(field.name)}")
    if field.example:
        _out(f"    Example: {field.example}")
    if field.docstring:
        _out("    Doc:")
        for line in field.docstring.splitlines():
            _out(f"      {line}")


def _describe(context: ConfigContext, fields: List[Field], hidden: bool) -> None:
    for group, group_fields in context.registry.grouped_sorted(fields):
        visible = [field for field in group_fields if hidden or not field.hidden]
        if not visible:
            continue
        _out(f"\n{group or 'General'}", style="bold cyan")
        for field in visible:
            _describe_field(context, field)
        _out()


@app.command("describe")
def describe_config(
    ctx: typer.Context,
    prefixes: Optional[List[str]] = typer.Argument(
        None, metavar="[PREFIX]...", help="Only describe fields starting with these prefixes"
    ),
    hidden: bool = typer.Option(False, "--hidden", help="Show hidden fields"),
    no_pager: bool = typer.Option(False, "--no-pager", help="Print directly instead of using a pager"),
    config_file: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
) -> None:
    """Describe configuration parameters."""
    context = load_context(ctx, config_file, verbose)
    selected = _select(context, prefixes)

    if no_pager:
        _describe(context, selected, hidden)
        return
    with console.pager(styles=False):
        _describe(context, selected, hidden)


def _parse_assignments(
    args: List[str], fields: Dict[str, Field]
) -> List[Tuple[Field, str]]:
    """Turn ``--name value`` / ``--name=value`` tokens into field assignments."""
    assignments: List[Tuple[Field, str]] = []
    index = 0
    while index < len(args):
        token = args[index]
        if not token.startswith("--") or token == "--":
            raise CliExit.error(f"Unexpected argument: {token}")
        name, has_value, value = token[2:].partition("=")
        field = fields.get(name)
        if field is None or field.hidden:
            raise CliExit.error(f"Unknown flag: --{name}")
        if not has_value:
            following = args[index + 1] if index + 1 < len(args) else None
            if following is not None and not following.startswith("--"):
                value = following
                index += 1
            elif field.type is FieldType.BOOL:
                value = "true"
            else:
                raise CliExit.error(f"Flag needs an argument: --{name}")
        assignments.append((field, value))
        index += 1
    return assignments


def _print_settable_fields(context: ConfigContext) -> None:
    table = Table(title="Fields", show_header=True, header_style="bold")
    table.add_column("Flag")
    table.add_column("Type")
    table.add_column("Description")
    for field in context.registry:
        if field.hidden:
            continue
        table.add_row(f"--{field.name}", str(field.type), field.description)
    console.print(table)


@app.command(
    "set",
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    epilog=_SET_EPILOG,
)
def set_config(
    ctx: typer.Context,
    config_file: Optional[str] = config_option(),
    verbose: bool = verbose_option(),
) -> None:
    """
    Set configuration values.

    Pass one --<field> <value> option per field. For more information about
    the configuration values, use the "describe" command.
    """
    context = load_context(ctx, config_file, verbose)
    assignments = _parse_assignments(list(ctx.args), context.registry.lookup_by_name())

    if not assignments:
        typer.echo(ctx.get_help())
        _print_settable_fields(context)
        raise CliExit.success()

    for field, value in assignments:
        if context.verbose:
            _out(f"# Setting: {field.name}: {value}")
        try:
            context.store.write(field.name, value)
        except ConfigError as exc:
            raise CliExit.error(f"Error: {exc}")

    try:
        path = context.store.save()
    except ConfigError as exc:
        raise CliExit.error(f"Failed to save configuration: {exc}")

    if context.verbose:
        _out(f"# Saved configuration to {path}")
