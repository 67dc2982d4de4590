"""Config management commands."""

import os
from dataclasses import fields

import typer
from rich.table import Table
from rich.text import Text

from wglinkmon.cli import config as cli_config
from wglinkmon.cli.output import console, print_error, print_success
from wglinkmon.config import ENV_PREFIX, config

app = typer.Typer(help="Configuration commands")

_SECRET_FIELDS = {"ROUTER_PASSWORD"}


def _display_value(name: str, value) -> str:
    if name in _SECRET_FIELDS:
        return "********" if value else ""
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    if isinstance(value, dict):
        return ",".join(f"{k}={v}" for k, v in sorted(value.items()))
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


@app.command("show")
def show_config():
    """Show current configuration."""
    table = Table(title="Current Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source")

    for f in fields(config):
        value = getattr(config, f.name)
        source = "env" if os.environ.get(f"{ENV_PREFIX}{f.name}") else "default"
        table.add_row(f.name, Text(_display_value(f.name, value)), source)

    # Output settings
    table.add_row("OUTPUT_FORMAT", cli_config.OUTPUT_FORMAT.value, "cli")

    console.print(table)


@app.command("check")
def check_config():
    """Validate allocation ranges, networks and reservation tables."""
    try:
        universe = config.build_universe()
        registry = config.build_registry()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(
        f"Configuration OK: ranges {universe}, {universe.id_capacity} ids, "
        f"{len(registry)} reserved"
    )
