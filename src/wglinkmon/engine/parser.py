"""
Peer record parser.

Turns one raw router peer into a ClassifiedPeer. Parsing never raises:
malformed fields degrade to absent or empty values and the peer is still
reported under a best-effort name.

Naming convention:
    Client names look like "MC05", "MC47-MONTAIN" or "MC112_BODEGA",
    optionally carrying the router-side interface prefix
    ("WIREGUARD-MC05"). The number after the prefix is the client id.

Activity heuristic:
    RouterOS reports the last handshake as a compact duration such as
    "45s", "3m12s", "2h5m" or "1w2d". A peer is active when the string is
    non-empty and contains none of the hour/day/week markers ("h", "d", "w"),
    i.e. the handshake happened less than an hour ago. This is a textual
    check, not a numeric parse of the duration.

Addressing:
    Tunnel and management entries are recognized by their text prefix
    ("100.100.100.", "172.16.100."), the same way the router operator reads
    them, so a peer keeps its tunnel suffix even when an entry is not
    canonical IPv4 ("100.100.100.07/32").
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterable
from functools import lru_cache

from wglinkmon.engine.allocator import classify
from wglinkmon.engine.registry import ReservationRegistry
from wglinkmon.models.peer import NEVER, NOT_AVAILABLE, ClassifiedPeer, RawPeerRecord
from wglinkmon.models.universe import AllocationUniverse
from wglinkmon.utils.logger import get_logger

logger = get_logger(__name__)

UNNAMED = "(unnamed)"

# Duration units of an hour or more in RouterOS notation
STALE_HANDSHAKE_MARKERS = ("h", "d", "w")

_OCTET = re.compile(r"\d+")


@lru_cache(maxsize=16)
def client_id_pattern(client_prefix: str, interface_prefix: str) -> re.Pattern:
    """
    Compile the client-name pattern.

    Matches an optional interface prefix, the client prefix, a number of two
    or more digits, then a "_"/"-" separator or the end of the string.
    """
    iface = re.escape(interface_prefix)
    prefix = re.escape(client_prefix)
    return re.compile(rf"^(?:{iface})?{prefix}(\d{{2,}})(?:[_-]|$)", re.IGNORECASE)


def parse_client_id(
    name: str | None,
    comment: str | None,
    universe: AllocationUniverse,
) -> int | None:
    """Extract the client id from the name, falling back to the comment."""
    pattern = client_id_pattern(universe.client_prefix, universe.interface_prefix)
    for text in (name, comment):
        if not text:
            continue
        match = pattern.match(text.strip())
        if match:
            return int(match.group(1))
    return None


def _entry_host(entry: str) -> str:
    """Address part of "a.b.c.d", "a.b.c.d/nn" or "a.b.c.d:port"."""
    return entry.split("/", 1)[0].split(":", 1)[0]


def _text_prefix(network: ipaddress.IPv4Network) -> str:
    """Dotted text of the whole octets covered by the prefix ("100.100.100.")."""
    octets = str(network.network_address).split(".")[: network.prefixlen // 8]
    return "".join(f"{octet}." for octet in octets)


def _in_network(host: str, network: ipaddress.IPv4Network) -> bool:
    """
    Whether an entry's host text belongs to a network.

    Octet-aligned networks match on the text prefix, so non-canonical
    spellings such as "100.100.100.07" still count as inside. Other
    networks fall back to a parsed membership check.
    """
    if network.prefixlen % 8 == 0:
        return host.startswith(_text_prefix(network))
    try:
        return ipaddress.IPv4Address(host) in network
    except ValueError:
        return False


def split_allowed_address(allowed_address: str | None) -> list[str]:
    """Split a comma-separated allowed-address list into trimmed entries."""
    if not allowed_address:
        return []
    return [entry.strip() for entry in allowed_address.split(",") if entry.strip()]


def parse_tunnel_suffix(
    entries: Iterable[str],
    universe: AllocationUniverse,
) -> int | None:
    """
    Final octet of the first entry inside the tunnel network.

    The octet is read as digits after the tunnel prefix, so "100.100.100.07"
    yields 7. The network and broadcast octets (0 and 255) are not host
    addresses and do not yield a suffix.
    """
    prefix = f"{universe.tunnel_base}."
    for entry in entries:
        host = _entry_host(entry)
        if not host.startswith(prefix):
            continue
        match = _OCTET.match(host[len(prefix):])
        if not match:
            continue
        suffix = int(match.group(0))
        if suffix in (0, 255):
            continue
        return suffix
    return None


def parse_lan_ranges(
    entries: Iterable[str],
    universe: AllocationUniverse,
) -> tuple[str, ...]:
    """
    Entries outside the tunnel and management networks, in input order.

    Entries that are not IPv4 at all are kept verbatim.
    """
    lans = []
    for entry in entries:
        host = _entry_host(entry)
        if _in_network(host, universe.tunnel_network) or _in_network(
            host, universe.management_network
        ):
            continue
        lans.append(entry)
    return tuple(lans)


def is_active_handshake(last_handshake: str | None) -> bool:
    """True when the handshake duration is shorter than one hour."""
    if not last_handshake:
        return False
    return not any(marker in last_handshake for marker in STALE_HANDSHAKE_MARKERS)


def parse_peer(
    record: RawPeerRecord,
    registry: ReservationRegistry,
    universe: AllocationUniverse,
) -> ClassifiedPeer:
    """Parse and classify one raw peer record."""
    entries = split_allowed_address(record.allowed_address)
    client_id = parse_client_id(record.name, record.comment, universe)
    suffix = parse_tunnel_suffix(entries, universe)
    is_active = is_active_handshake(record.last_handshake)

    peer = ClassifiedPeer(
        client_id=client_id,
        display_name=record.name or record.comment or UNNAMED,
        tunnel_address=None if suffix is None else universe.tunnel_address(suffix),
        tunnel_suffix=suffix,
        lan_ranges=parse_lan_ranges(entries, universe),
        status=classify(client_id, is_active, registry),
        last_handshake=record.last_handshake or NEVER,
        comment=record.comment or "",
        endpoint_address=record.endpoint_address or NOT_AVAILABLE,
        provider_id=record.provider_id or "",
        disabled=record.disabled,
        active=is_active,
    )

    logger.trace(
        f"Parsed peer {peer.display_name!r}: id={client_id}, suffix={suffix}, "
        f"lans={list(peer.lan_ranges)}, status={peer.status.value}"
    )
    return peer


def parse_peers(
    records: Iterable[RawPeerRecord],
    registry: ReservationRegistry,
    universe: AllocationUniverse,
) -> list[ClassifiedPeer]:
    """Parse every record, preserving input order."""
    return [parse_peer(record, registry, universe) for record in records]
