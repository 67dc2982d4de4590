"""
Reconciliation report builder.

Merges three kinds of rows into one ordered report:

1. Peers parsed from the router records.
2. Registry rows for reserved ids that no peer uses.
3. Available placeholders for every remaining id in the id domain, each
   carrying the tunnel suffix and LAN block it would receive next.

Placeholders are processed in ascending id order and every proposed suffix
and LAN block is marked used before the next placeholder is computed, so no
two placeholders share a value while the domains last.

Duplicate ids:
    When two or more peers claim the same client id, one of them keeps the
    id (the lowest by name, provider id, then tunnel suffix, so the choice
    does not depend on input order). The others are still reported, without
    a numeric id and flagged as duplicates. Their suffixes and LANs stay
    marked as used.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from wglinkmon.engine.allocator import next_free_lan_block, next_free_suffix
from wglinkmon.engine.parser import parse_peers
from wglinkmon.engine.registry import ReservationRegistry
from wglinkmon.models.enums import PeerStatus, ReservationKind, RowSource
from wglinkmon.models.peer import (
    ClassifiedPeer,
    RawPeerRecord,
    ReconciliationReport,
    ReportRow,
    ReportStats,
)
from wglinkmon.models.universe import AllocationUniverse
from wglinkmon.utils.logger import get_logger

logger = get_logger(__name__)

DDNS_COMMENT = "Reserved for DDNS"
PLACEHOLDER_COMMENT = "Next available"


def _peer_rank(peer: ClassifiedPeer) -> tuple:
    """Order-independent rank used to pick the owner of a duplicated id."""
    return (
        peer.display_name,
        peer.provider_id,
        -1 if peer.tunnel_suffix is None else peer.tunnel_suffix,
        peer.lan_ranges,
    )


def _peer_rows(peers: list[ClassifiedPeer]) -> tuple[list[ReportRow], list[int]]:
    """Convert peers to rows, demoting all but one owner of each duplicated id."""
    # client id -> index of the owning peer
    owners: dict[int, int] = {}
    ranked = sorted(range(len(peers)), key=lambda i: (_peer_rank(peers[i]), i))
    for index in ranked:
        client_id = peers[index].client_id
        if client_id is not None:
            owners.setdefault(client_id, index)

    counts = Counter(p.client_id for p in peers if p.client_id is not None)
    duplicate_ids = sorted(cid for cid, count in counts.items() if count > 1)

    rows = []
    for index, peer in enumerate(peers):
        duplicate = peer.client_id is not None and owners[peer.client_id] != index
        if duplicate:
            owner = peers[owners[peer.client_id]]
            logger.warning(
                f"Peer {peer.display_name!r} claims client id {peer.client_id}, "
                f"already owned by {owner.display_name!r}"
            )
        rows.append(ReportRow.from_peer(peer, duplicate=duplicate))

    return rows, duplicate_ids


def _registry_row(
    client_id: int,
    registry: ReservationRegistry,
    universe: AllocationUniverse,
) -> ReportRow:
    """Row for a reserved id that has no peer."""
    kind = registry.classify(client_id)
    fixed_lan = registry.fixed_lan(client_id)

    if kind == ReservationKind.STATIC_OVERRIDE:
        comment = f"Manual: {fixed_lan}"
    else:
        comment = DDNS_COMMENT

    return ReportRow(
        client_id=client_id,
        name=universe.client_name(client_id),
        status=kind.status,
        source=RowSource.REGISTRY,
        lan_ranges=(fixed_lan,) if fixed_lan else (),
        comment=comment,
    )


def _sort_key(row: ReportRow) -> tuple:
    """Numeric ids first, ascending; then unnamed rows by folded name."""
    if row.client_id is not None:
        return (0, row.client_id)
    return (
        1,
        row.name.casefold(),
        row.name,
        row.provider_id,
        -1 if row.tunnel_suffix is None else row.tunnel_suffix,
        row.lan_ranges,
        row.comment,
        row.last_handshake,
        row.status.value,
    )


def compute_stats(
    rows: Iterable[ReportRow],
    universe: AllocationUniverse,
    duplicate_ids: Iterable[int] = (),
) -> ReportStats:
    """Aggregate counts per status."""
    rows = list(rows)
    by_status = Counter(row.status for row in rows)
    return ReportStats(
        total=len(rows),
        active=by_status[PeerStatus.ACTIVE],
        inactive=by_status[PeerStatus.INACTIVE],
        reserved_ddns=by_status[PeerStatus.RESERVED_DDNS],
        static_override=by_status[PeerStatus.STATIC_OVERRIDE],
        available_rows=by_status[PeerStatus.AVAILABLE],
        available=universe.id_capacity - len(rows),
        duplicate_ids=tuple(sorted(duplicate_ids)),
    )


def build_report(
    peers: list[ClassifiedPeer],
    registry: ReservationRegistry,
    universe: AllocationUniverse,
) -> ReconciliationReport:
    """Build the ordered report from already parsed peers."""
    rows, duplicate_ids = _peer_rows(peers)

    used_ids = {p.client_id for p in peers if p.client_id is not None}
    used_suffixes = {p.tunnel_suffix for p in peers if p.tunnel_suffix is not None}
    used_lans = {lan for p in peers for lan in p.lan_ranges}

    # Reserved ids without a peer
    for client_id in sorted(registry.ids - used_ids):
        row = _registry_row(client_id, registry, universe)
        rows.append(row)
        used_ids.add(client_id)
        used_lans.update(row.lan_ranges)

    # Available placeholders, folding each proposal into the used sets
    for client_id in universe.client_ids:
        if client_id in used_ids:
            continue
        suffix = next_free_suffix(used_suffixes, universe)
        lan = next_free_lan_block(used_lans, universe)
        rows.append(
            ReportRow(
                client_id=client_id,
                name=universe.client_name(client_id),
                status=PeerStatus.AVAILABLE,
                source=RowSource.PLACEHOLDER,
                tunnel_address=universe.tunnel_address(suffix),
                tunnel_suffix=suffix,
                lan_ranges=(lan,),
                comment=PLACEHOLDER_COMMENT,
            )
        )
        used_ids.add(client_id)
        used_suffixes.add(suffix)
        used_lans.add(lan)

    rows.sort(key=_sort_key)
    stats = compute_stats(rows, universe, duplicate_ids)

    logger.info(
        f"Reconciled {len(peers)} peers into {stats.total} rows: "
        f"{stats.active} active, {stats.inactive} inactive, "
        f"{stats.reserved_ddns} DDNS, {stats.static_override} static, "
        f"{stats.available_rows} available"
    )
    return ReconciliationReport(rows=tuple(rows), stats=stats)


def reconcile(
    records: Iterable[RawPeerRecord],
    registry: ReservationRegistry,
    universe: AllocationUniverse,
) -> ReconciliationReport:
    """Parse raw router records and build the reconciliation report."""
    peers = parse_peers(records, registry, universe)
    return build_report(peers, registry, universe)


def filter_rows(
    rows: Iterable[ReportRow],
    search: str | None = None,
    status: PeerStatus | str | None = None,
) -> list[ReportRow]:
    """
    Filter report rows for display.

    Args:
        rows: Report rows
        search: Case-insensitive match on name and comment, plain substring
            match on the tunnel address
        status: Keep only this status; None or "all" keeps every status

    Returns:
        Matching rows, in report order
    """
    rows = list(rows)

    if search:
        needle = search.casefold()
        rows = [
            row
            for row in rows
            if needle in row.name.casefold()
            or search in row.tunnel_display
            or needle in row.comment.casefold()
        ]

    if status and status != "all":
        wanted = PeerStatus(status)
        rows = [row for row in rows if row.status == wanted]

    return rows
