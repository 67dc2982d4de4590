"""Peer reconciliation commands."""

import json
from pathlib import Path
from typing import Annotated

import typer

from wglinkmon.cli import config as cli_config
from wglinkmon.cli.formatters import (
    format_report_table,
    format_reservation_table,
    format_stats_panel,
    format_suggestion_panel,
)
from wglinkmon.cli.output import console, print_error, print_model_json
from wglinkmon.config import config
from wglinkmon.engine import filter_rows, reconcile, suggest_allocation
from wglinkmon.host.services.routeros import (
    RouterOSError,
    fetch_peers,
    parse_peer_payloads,
)
from wglinkmon.models.enums import OutputFormat, PeerStatus
from wglinkmon.models.peer import RawPeerRecord, ReconciliationReport
from wglinkmon.models.schemas import (
    ReportResponse,
    ReservationResponse,
    SuggestionResponse,
)

app = typer.Typer(help="Peer reconciliation commands")

InputOption = Annotated[
    Path | None,
    typer.Option(
        "--input",
        "-i",
        help="RouterOS peer export (JSON) instead of querying the router",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
]


def _load_records(input_file: Path | None) -> list[RawPeerRecord]:
    """Read peers from an export file or from the configured router."""
    if input_file is not None:
        try:
            data = json.loads(input_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RouterOSError(f"{input_file} is not valid JSON: {e}")
        return parse_peer_payloads(data)

    if not config.has_router():
        raise RouterOSError(
            "No --input file given and WGLINKMON_ROUTER_URL is not set."
        )
    return fetch_peers(config)


def _reconcile(input_file: Path | None) -> ReconciliationReport:
    records = _load_records(input_file)
    return reconcile(records, config.build_registry(), config.build_universe())


@app.command("report")
def report(
    input_file: InputOption = None,
    search: Annotated[
        str | None,
        typer.Option("--search", "-q", help="Match name, tunnel IP or comment"),
    ] = None,
    status: Annotated[
        str,
        typer.Option(
            "--status",
            "-s",
            help="Filter by status (all/active/inactive/reserved-ddns/"
            "static-override/available)",
        ),
    ] = "all",
):
    """Show the reconciliation report."""
    if status != "all":
        try:
            PeerStatus(status)
        except ValueError:
            print_error(f"Invalid status: {status}")
            raise typer.Exit(1)

    try:
        result = _reconcile(input_file)
    except (RouterOSError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    rows = filter_rows(result.rows, search=search, status=status)

    if cli_config.OUTPUT_FORMAT == OutputFormat.JSON:
        print_model_json(ReportResponse.from_report(result, rows=rows))
        return

    if not rows:
        console.print("[yellow]No rows match.[/yellow]")
    else:
        console.print(format_report_table(rows))
    console.print(format_stats_panel(result.stats))


@app.command("suggest")
def suggest(input_file: InputOption = None):
    """Show the next free client id, tunnel address and LAN block."""
    try:
        result = _reconcile(input_file)
    except (RouterOSError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    suggestion = suggest_allocation(result, config.build_universe())
    if suggestion is None:
        print_error("No client id is available.")
        raise typer.Exit(1)

    if cli_config.OUTPUT_FORMAT == OutputFormat.JSON:
        print_model_json(SuggestionResponse.from_suggestion(suggestion))
        return

    console.print(format_suggestion_panel(suggestion))


@app.command("reservations")
def reservations():
    """List reserved client ids."""
    try:
        entries = config.build_registry().entries()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if cli_config.OUTPUT_FORMAT == OutputFormat.JSON:
        print_model_json([ReservationResponse.from_entry(e) for e in entries])
        return

    if not entries:
        console.print("[yellow]No reserved ids.[/yellow]")
        return
    console.print(format_reservation_table(entries))
