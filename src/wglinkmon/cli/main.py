"""
wg-link-monitor CLI entry point.

Usage:
    wglinkmon [OPTIONS] COMMAND [ARGS]...

Commands:
    peers     Reconciliation report, next allocation, reservations
    config    Configuration
    serve     Run the HTTP service
    version   Show version information
"""

from typing import Annotated

import typer

from wglinkmon.cli import config as cli_config
from wglinkmon.cli.commands import config_cmd, peers
from wglinkmon.cli.output import console
from wglinkmon.config import config
from wglinkmon.models.enums import LogLevel, OutputFormat
from wglinkmon.utils.logger import configure_logging

app = typer.Typer(
    name="wglinkmon",
    help="WireGuard link monitor and address allocator",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(peers.app, name="peers", help="Peer reconciliation")
app.add_typer(config_cmd.app, name="config", help="Configuration")


@app.callback()
def main(
    router_url: Annotated[
        str | None,
        typer.Option("--router", "-r", help="RouterOS REST base URL"),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: table|json"),
    ] = OutputFormat.TABLE,
    log_level: Annotated[
        LogLevel | None,
        typer.Option("--log-level", help="Log verbosity (full/debug/info/warning)"),
    ] = None,
):
    """
    WireGuard link monitor.

    Reconcile router peers against the reservation table and find the next
    free client id, tunnel address and LAN block.
    """
    if router_url:
        config.ROUTER_URL = router_url
    if log_level:
        config.LOG_LEVEL = log_level
    cli_config.OUTPUT_FORMAT = output_format
    # Logs go to stderr, warnings only unless --log-level is given
    configure_logging(
        config.LOG_LEVEL if log_level else LogLevel.WARNING, config.LOG_FILE
    )


@app.command("serve")
def serve(
    host: Annotated[
        str | None, typer.Option("--host", "-H", help="Bind address")
    ] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port")] = None,
):
    """Run the HTTP service."""
    from wglinkmon.host.app import run as run_server

    run_server(host=host, port=port)


@app.command("version")
def version():
    """Show version information."""
    from wglinkmon import __version__

    console.print(f"wg-link-monitor v{__version__}")


def run():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
