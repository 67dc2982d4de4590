"""Rich renderables for reports, suggestions and reservations."""

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wglinkmon.models.enums import PeerStatus
from wglinkmon.models.peer import (
    AllocationSuggestion,
    ReportRow,
    ReportStats,
    ReservationEntry,
)

# Status colors
STATUS_COLORS = {
    PeerStatus.ACTIVE: "green",
    PeerStatus.INACTIVE: "yellow",
    PeerStatus.RESERVED_DDNS: "blue",
    PeerStatus.STATIC_OVERRIDE: "magenta",
    PeerStatus.AVAILABLE: "dim",
}

STATUS_LABELS = {
    PeerStatus.ACTIVE: "Active",
    PeerStatus.INACTIVE: "Inactive",
    PeerStatus.RESERVED_DDNS: "DDNS",
    PeerStatus.STATIC_OVERRIDE: "Static",
    PeerStatus.AVAILABLE: "Available",
}


def format_status(status: PeerStatus) -> Text:
    """Format status with color."""
    return Text(STATUS_LABELS.get(status, status.value), style=STATUS_COLORS[status])


def format_report_table(rows: list[ReportRow], title: str = "WireGuard Links") -> Table:
    """Render report rows as a table."""
    table = Table(title=title)
    table.add_column("ID", style="cyan")
    table.add_column("Tunnel IP", style="bold")
    table.add_column("LANs")
    table.add_column("Status")
    table.add_column("Last Handshake")
    table.add_column("Comment", style="dim")

    for row in rows:
        proposed = row.status == PeerStatus.AVAILABLE
        arrow = "-> " if proposed else ""
        lans = ", ".join(f"{arrow}{lan}" for lan in row.lan_ranges) or "-"
        # Router-supplied text is rendered literally, never as markup
        name = Text(row.name)
        if row.duplicate:
            name.append(" (dup)", style="red")

        table.add_row(
            name,
            Text(f"{arrow}{row.tunnel_display}"),
            Text(lans),
            format_status(row.status),
            Text(row.last_handshake),
            Text(row.comment or "-"),
        )

    return table


def format_stats_panel(stats: ReportStats) -> Panel:
    """Render the summary counts."""
    text = (
        f"Total: [bold]{stats.total}[/bold]  |  "
        f"Active: [green]{stats.active}[/green]  |  "
        f"Inactive: [yellow]{stats.inactive}[/yellow]  |  "
        f"DDNS: [blue]{stats.reserved_ddns}[/blue]  |  "
        f"Static: [magenta]{stats.static_override}[/magenta]\n"
        f"Available rows: [cyan]{stats.available_rows}[/cyan]  |  "
        f"Capacity left: [cyan]{stats.available}[/cyan]"
    )
    if stats.duplicate_ids:
        ids = ", ".join(str(i) for i in stats.duplicate_ids)
        text += f"\n[red]Duplicate client ids:[/red] {ids}"
    return Panel(text, title="Summary", border_style="blue")


def format_suggestion_panel(suggestion: AllocationSuggestion) -> Panel:
    """Render the next available allocation."""
    text = (
        f"Client: [bold cyan]{escape(suggestion.client_name)}[/bold cyan]\n"
        f"Tunnel IP: [bold]{escape(suggestion.tunnel_address)}[/bold]\n"
        f"LAN: [bold]{escape(suggestion.lan_block)}[/bold]"
    )
    return Panel(text, title="Next Available", border_style="green")


def format_reservation_table(entries: list[ReservationEntry]) -> Table:
    """Render the reservation table."""
    table = Table(title="Reserved Client Ids")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Kind")
    table.add_column("Fixed LAN")

    for entry in entries:
        table.add_row(
            str(entry.client_id),
            format_status(entry.kind.status),
            Text(entry.fixed_lan or "-"),
        )

    return table
