"""
Allocation engine.

Classifies client ids and finds the lowest free value in each bounded
resource domain of the tunnel network:

- client ids       (default 1-200)
- tunnel suffixes  (default 2-253, final octet inside 100.100.100.0/24)
- LAN blocks       (default 10-209, mapped to 192.168.{n}.0/24)

Every function is a pure function of its arguments. A scan depends only on
the set of used values, never on the order they were observed in.

Exhaustion:
    When a domain is fully consumed, the scan returns the lowest value of the
    domain as a fallback. That value is already in use, so the suggestion is a
    duplicate. The fallback is logged but deliberately not turned into an
    error; callers that need strict detection compare the result against
    their used-set.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from wglinkmon.engine.registry import ReservationRegistry
from wglinkmon.models.enums import PeerStatus
from wglinkmon.models.peer import AllocationSuggestion, ReconciliationReport
from wglinkmon.models.universe import AllocationUniverse
from wglinkmon.utils.logger import get_logger

logger = get_logger(__name__)


def _lowest_free(candidates: Iterable, used: Set, fallback, domain: str):
    """Return the first candidate not in `used`, or `fallback` when none is."""
    for candidate in candidates:
        if candidate not in used:
            return candidate

    logger.warning(
        f"No free {domain} left; falling back to {fallback}, which is already in use"
    )
    return fallback


# =============================================================================
# Classification
# =============================================================================


def classify(
    client_id: int | None,
    is_active: bool,
    registry: ReservationRegistry,
) -> PeerStatus:
    """
    Classify a peer.

    Registry reservations win over the activity-derived status:
    static override first, then DDNS reservation, then active/inactive.
    """
    kind = registry.classify(client_id)
    if kind is not None:
        return kind.status
    return PeerStatus.ACTIVE if is_active else PeerStatus.INACTIVE


# =============================================================================
# Free Value Scans
# =============================================================================


def next_free_id(
    used_ids: Set[int],
    registry: ReservationRegistry,
    universe: AllocationUniverse,
) -> int:
    """
    Lowest client id that is neither used nor reserved.

    Falls back to the lowest id of the domain when every id is taken.
    """
    unavailable = set(used_ids) | registry.ids
    return _lowest_free(
        universe.client_ids, unavailable, universe.client_ids.start, "client id"
    )


def next_free_suffix(used_suffixes: Set[int], universe: AllocationUniverse) -> int:
    """
    Lowest tunnel suffix not in use.

    Falls back to the lowest suffix of the domain when every suffix is taken.
    """
    return _lowest_free(
        universe.tunnel_suffixes,
        used_suffixes,
        universe.tunnel_suffixes.start,
        "tunnel suffix",
    )


def next_free_lan_block(used_lans: Set[str], universe: AllocationUniverse) -> str:
    """
    Lowest LAN block whose exact CIDR string is not in use.

    Only exact string matches count: "192.168.11.0/24" is not blocked by
    "192.168.11.1/32" or "192.168.11.0/25".
    """
    return _lowest_free(
        universe.iter_lan_blocks(),
        used_lans,
        universe.lan_block(universe.lan_blocks.start),
        "LAN block",
    )


# =============================================================================
# Suggestion
# =============================================================================


def suggest_allocation(
    report: ReconciliationReport,
    universe: AllocationUniverse,
) -> AllocationSuggestion | None:
    """
    Build the pre-fill values for a new site from the first available row.

    Returns None when the report holds no available row (id space full).
    """
    row = report.first_available()
    if row is None:
        logger.info("No available client id in the report")
        return None

    lan_block = row.lan_ranges[0]
    suggestion = AllocationSuggestion(
        client_id=row.client_id,
        client_name=row.name,
        tunnel_suffix=row.tunnel_suffix,
        tunnel_address=universe.tunnel_address(row.tunnel_suffix),
        lan_block=lan_block,
        lan_prefix=lan_block.split("/", 1)[0].rsplit(".", 1)[0],
    )

    logger.info(
        f"Next available: {suggestion.client_name}, "
        f"IP {suggestion.tunnel_address}, LAN {suggestion.lan_block}"
    )
    return suggestion
