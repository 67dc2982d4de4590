"""Data models for peer reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field

from wglinkmon.models.enums import PeerStatus, ReservationKind, RowSource

# Display value for fields that do not apply to a row
NOT_AVAILABLE = "N/A"
NEVER = "never"


@dataclass(frozen=True)
class RawPeerRecord:
    """A WireGuard peer as reported by the router, before any parsing."""

    name: str = ""
    comment: str = ""
    allowed_address: str = ""  # "100.100.100.7/32,192.168.30.0/24"
    last_handshake: str | None = None  # RouterOS duration, e.g. "1m12s"
    disabled: bool = False
    provider_id: str = ""  # RouterOS ".id", e.g. "*1A"
    endpoint_address: str = ""
    interface: str = ""


@dataclass(frozen=True)
class ClassifiedPeer:
    """A parsed peer with its client id, addressing and status."""

    client_id: int | None
    display_name: str
    tunnel_address: str | None
    tunnel_suffix: int | None
    lan_ranges: tuple[str, ...]
    status: PeerStatus
    last_handshake: str = NEVER
    comment: str = ""
    endpoint_address: str = NOT_AVAILABLE
    provider_id: str = ""
    disabled: bool = False
    active: bool = False  # Handshake within the last hour, before reservations


@dataclass(frozen=True)
class ReservationEntry:
    """A client id permanently excluded from automatic allocation."""

    client_id: int
    kind: ReservationKind
    fixed_lan: str | None = None  # Only for STATIC_OVERRIDE


@dataclass(frozen=True)
class ReportRow:
    """
    One row of the reconciliation report.

    For PLACEHOLDER rows, tunnel_suffix/tunnel_address/lan_ranges hold the
    proposed allocation rather than an observed one.
    """

    client_id: int | None
    name: str
    status: PeerStatus
    source: RowSource
    tunnel_address: str | None = None
    tunnel_suffix: int | None = None
    lan_ranges: tuple[str, ...] = ()
    last_handshake: str = NOT_AVAILABLE
    comment: str = ""
    endpoint_address: str = NOT_AVAILABLE
    provider_id: str = ""
    duplicate: bool = False  # Lost its client id (and any reservation status)

    @classmethod
    def from_peer(cls, peer: ClassifiedPeer, duplicate: bool = False) -> ReportRow:
        """Build a report row from a parsed peer."""
        status = peer.status
        if duplicate:
            # The reservation belongs to the owning row
            status = PeerStatus.ACTIVE if peer.active else PeerStatus.INACTIVE

        return cls(
            client_id=None if duplicate else peer.client_id,
            name=peer.display_name,
            status=status,
            source=RowSource.PEER,
            tunnel_address=peer.tunnel_address,
            tunnel_suffix=peer.tunnel_suffix,
            lan_ranges=peer.lan_ranges,
            last_handshake=peer.last_handshake,
            comment=peer.comment,
            endpoint_address=peer.endpoint_address,
            provider_id=peer.provider_id,
            duplicate=duplicate,
        )

    @property
    def tunnel_display(self) -> str:
        """Tunnel address, or N/A when the row has none."""
        return self.tunnel_address or NOT_AVAILABLE


@dataclass(frozen=True)
class ReportStats:
    """
    Aggregate counts over a report.

    `available` is the id capacity minus the total row count, as shown on
    the monitor dashboard. It is not the number of AVAILABLE rows (that is
    `available_rows`) and can be zero or negative once unnamed peers are
    included.
    """

    total: int = 0
    active: int = 0
    inactive: int = 0
    reserved_ddns: int = 0
    static_override: int = 0
    available_rows: int = 0
    available: int = 0
    duplicate_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ReconciliationReport:
    """Ordered report rows plus their summary counts."""

    rows: tuple[ReportRow, ...] = ()
    stats: ReportStats = field(default_factory=ReportStats)

    def first_available(self) -> ReportRow | None:
        """First placeholder row, used to pre-fill a creation form."""
        return next(
            (row for row in self.rows if row.status == PeerStatus.AVAILABLE), None
        )


@dataclass(frozen=True)
class AllocationSuggestion:
    """Next free id, tunnel address and LAN block for a new site."""

    client_id: int
    client_name: str  # "MC05"
    tunnel_suffix: int
    tunnel_address: str  # "100.100.100.12"
    lan_block: str  # "192.168.14.0/24"
    lan_prefix: str  # "192.168.14"
