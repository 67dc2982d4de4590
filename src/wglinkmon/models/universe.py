"""
Allocation universe for the tunnel network.

Holds the three bounded resource domains that the allocation engine scans,
together with the two networks that are transport-internal and never count
as a site LAN.

Range format: IDS/SUFFIXES/LAN_BLOCKS, each a closed "LOW-HIGH" interval.

Examples:
- 1-200/2-253/10-209 (default):
  - Client ids: MC01 .. MC200
  - Tunnel suffixes: 100.100.100.2 .. 100.100.100.253
  - LAN blocks: 192.168.10.0/24 .. 192.168.209.0/24

- 1-50/10-99/100-149:
  - Client ids: MC01 .. MC50
  - Tunnel suffixes: 100.100.100.10 .. 100.100.100.99
  - LAN blocks: 192.168.100.0/24 .. 192.168.149.0/24
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Iterator


def _parse_interval(raw: str, label: str, config_str: str) -> range:
    """Parse a closed "LOW-HIGH" interval into an inclusive range."""
    try:
        low_str, high_str = raw.split("-", 1)
        low, high = int(low_str), int(high_str)
    except ValueError:
        raise ValueError(
            f"Invalid {label} interval '{raw}' in '{config_str}'. "
            f"Expected LOW-HIGH with integer bounds (e.g., '1-200')."
        )

    if low > high:
        raise ValueError(
            f"Invalid {label} interval '{raw}': lower bound {low} "
            f"is greater than upper bound {high}."
        )

    return range(low, high + 1)


@dataclass(frozen=True)
class AllocationUniverse:
    """
    Bounded allocation domains.

    Attributes:
        client_ids: Inclusive range of client ids
        tunnel_suffixes: Inclusive range of final octets inside the tunnel network
        lan_blocks: Inclusive range of block indices for the LAN template
        tunnel_network: Point-to-point monitoring network shared by all sites
        management_network: Monitoring overlay behind the concentrator
        lan_block_template: Format string turning a block index into a CIDR
        client_prefix: Fixed prefix of a client name (e.g., "MC" in "MC05")
        interface_prefix: Optional prefix seen on router-side peer names
    """

    client_ids: range = range(1, 201)
    tunnel_suffixes: range = range(2, 254)
    lan_blocks: range = range(10, 210)
    tunnel_network: ipaddress.IPv4Network = field(
        default=ipaddress.IPv4Network("100.100.100.0/24")
    )
    management_network: ipaddress.IPv4Network = field(
        default=ipaddress.IPv4Network("172.16.100.0/24")
    )
    lan_block_template: str = "192.168.{n}.0/24"
    client_prefix: str = "MC"
    interface_prefix: str = "WIREGUARD-"

    DEFAULT_RANGES = "1-200/2-253/10-209"

    @classmethod
    def parse(
        cls,
        config_str: str,
        tunnel_network: str = "100.100.100.0/24",
        management_network: str = "172.16.100.0/24",
        lan_block_template: str = "192.168.{n}.0/24",
        client_prefix: str = "MC",
        interface_prefix: str = "WIREGUARD-",
    ) -> AllocationUniverse:
        """
        Parse a range configuration string.

        Args:
            config_str: Format "IDS/SUFFIXES/LAN_BLOCKS", e.g. "1-200/2-253/10-209"
            tunnel_network: Tunnel network in CIDR notation
            management_network: Management overlay network in CIDR notation
            lan_block_template: Template with a "{n}" placeholder
            client_prefix: Fixed prefix of client names
            interface_prefix: Optional prefix of router-side peer names

        Returns:
            AllocationUniverse instance

        Raises:
            ValueError: If the format is invalid or a bound is out of range
        """
        parts = config_str.strip().split("/")

        if len(parts) != 3:
            raise ValueError(
                f"Invalid allocation range format: '{config_str}'. "
                f"Expected format: IDS/SUFFIXES/LAN_BLOCKS "
                f"(e.g., '{cls.DEFAULT_RANGES}')"
            )

        client_ids = _parse_interval(parts[0], "client id", config_str)
        suffixes = _parse_interval(parts[1], "tunnel suffix", config_str)
        lan_blocks = _parse_interval(parts[2], "LAN block", config_str)

        if client_ids.start < 0:
            raise ValueError(f"Invalid client id range: {parts[0]}. Ids start at 0.")

        if suffixes.start < 1 or suffixes.stop - 1 > 254:
            raise ValueError(
                f"Invalid tunnel suffix range: {parts[1]}. "
                f"Must stay between 1 and 254."
            )

        if lan_blocks.start < 0 or lan_blocks.stop - 1 > 255:
            raise ValueError(
                f"Invalid LAN block range: {parts[2]}. Must stay between 0 and 255."
            )

        if "{n}" not in lan_block_template:
            raise ValueError(
                f"Invalid LAN block template '{lan_block_template}': "
                f"missing '{{n}}' placeholder."
            )

        try:
            tunnel = ipaddress.IPv4Network(tunnel_network)
            management = ipaddress.IPv4Network(management_network)
        except ValueError as e:
            raise ValueError(f"Invalid network in allocation universe: {e}")

        if tunnel.prefixlen != 24:
            raise ValueError(
                f"Invalid tunnel network {tunnel}: suffixes are a final octet, "
                f"so the tunnel network must be a /24."
            )

        return cls(
            client_ids=client_ids,
            tunnel_suffixes=suffixes,
            lan_blocks=lan_blocks,
            tunnel_network=tunnel,
            management_network=management,
            lan_block_template=lan_block_template,
            client_prefix=client_prefix,
            interface_prefix=interface_prefix,
        )

    @classmethod
    def default(cls) -> AllocationUniverse:
        """Get the default universe (1-200/2-253/10-209)."""
        return cls.parse(cls.DEFAULT_RANGES)

    @property
    def id_capacity(self) -> int:
        """Number of client ids in the domain."""
        return len(self.client_ids)

    @property
    def tunnel_base(self) -> str:
        """First three octets of the tunnel network (e.g., "100.100.100")."""
        return str(self.tunnel_network.network_address).rsplit(".", 1)[0]

    def lan_block(self, index: int) -> str:
        """Map a block index to its CIDR string (e.g., 11 -> "192.168.11.0/24")."""
        return self.lan_block_template.format(n=index)

    def iter_lan_blocks(self) -> Iterator[str]:
        """Yield every LAN block CIDR in ascending index order."""
        for index in self.lan_blocks:
            yield self.lan_block(index)

    def client_name(self, client_id: int) -> str:
        """Zero-padded client name (e.g., 5 -> "MC05", 123 -> "MC123")."""
        return f"{self.client_prefix}{client_id:02d}"

    def tunnel_address(self, suffix: int) -> str:
        """Get the tunnel address for a suffix (e.g., 7 -> "100.100.100.7")."""
        return f"{self.tunnel_base}.{suffix}"

    def __str__(self) -> str:
        """Return the ranges in format string."""

        def _fmt(r: range) -> str:
            return f"{r.start}-{r.stop - 1}"

        return (
            f"{_fmt(self.client_ids)}/{_fmt(self.tunnel_suffixes)}/"
            f"{_fmt(self.lan_blocks)}"
        )
