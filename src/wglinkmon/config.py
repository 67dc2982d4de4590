"""
Configuration for wg-link-monitor.

This module defines the configuration dataclass shared by the CLI and the
HTTP service, providing a centralized place for every named bound,
reservation table and connection setting.

Configuration can be modified at runtime by importing the global config
instance and updating its attributes, or loaded from WGLINKMON_* environment
variables.

Usage:
    from wglinkmon.config import config

    config.ROUTER_URL = "https://router.example.net"
    config.LOG_LEVEL = LogLevel.DEBUG
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields

from wglinkmon.engine.registry import ReservationRegistry
from wglinkmon.models.enums import LogLevel
from wglinkmon.models.universe import AllocationUniverse

ENV_PREFIX = "WGLINKMON_"

DEFAULT_DDNS_RESERVED_IDS = [2, 7, 14, 20, 26, 46, 62, 66, 70]
DEFAULT_STATIC_OVERRIDES = {
    5: "172.16.100.26",
    8: "190.2.221.40:10554",
    19: "192.168.13.0/24",
    21: "201.193.161.165",
    22: "192.168.11.0/24",
    31: "177.93.6.24",
    38: "201.192.162.70:5554",
    63: "177.93.31.175",
}


# =============================================================================
# Environment Parsing
# =============================================================================


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean value '{raw}'")


def _parse_id_list(raw: str) -> list[int]:
    """Parse "2,7,14" into [2, 7, 14]."""
    return [int(part) for part in raw.split(",") if part.strip()]


def _parse_overrides(raw: str) -> dict[int, str]:
    """Parse "5=172.16.100.26,19=192.168.13.0/24" into a dict."""
    result = {}
    for part in raw.split(","):
        if not part.strip():
            continue
        key, sep, value = part.partition("=")
        if not sep or not value.strip():
            raise ValueError(f"Invalid static override '{part}', expected ID=LAN")
        result[int(key)] = value.strip()
    return result


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class MonitorConfig:
    """
    wg-link-monitor configuration.

    Attributes:
        ROUTER_URL: Base URL of the RouterOS REST API (e.g. https://router).
        TUNNEL_NETWORK: Point-to-point monitoring network shared by all sites.
        ALLOCATION_RANGES: Client id, tunnel suffix and LAN block ranges.
        DDNS_RESERVED_IDS: Ids withheld for DDNS-based access.
        STATIC_OVERRIDES: Ids bound to a manually configured LAN value.
        LOG_LEVEL: Logging verbosity level.
    """

    # -------------------------------------------------------------------------
    # Router Connection
    # -------------------------------------------------------------------------

    ROUTER_URL: str = ""
    ROUTER_USERNAME: str = ""
    ROUTER_PASSWORD: str = ""
    ROUTER_VERIFY_TLS: bool = True
    ROUTER_TIMEOUT_SECONDS: float = 15.0
    # Only fetch peers of this WireGuard interface (empty = all)
    ROUTER_INTERFACE: str = ""

    # -------------------------------------------------------------------------
    # Tunnel Addressing
    # -------------------------------------------------------------------------

    TUNNEL_NETWORK: str = "100.100.100.0/24"
    # Monitoring overlay behind the concentrator, never a site LAN
    MANAGEMENT_NETWORK: str = "172.16.100.0/24"

    # -------------------------------------------------------------------------
    # Allocation Bounds
    # -------------------------------------------------------------------------

    # Format: IDS/SUFFIXES/LAN_BLOCKS, closed intervals
    ALLOCATION_RANGES: str = AllocationUniverse.DEFAULT_RANGES
    LAN_BLOCK_TEMPLATE: str = "192.168.{n}.0/24"

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    CLIENT_PREFIX: str = "MC"
    INTERFACE_PREFIX: str = "WIREGUARD-"

    # -------------------------------------------------------------------------
    # Reservations
    # -------------------------------------------------------------------------

    DDNS_RESERVED_IDS: list[int] = field(
        default_factory=lambda: list(DEFAULT_DDNS_RESERVED_IDS)
    )
    STATIC_OVERRIDES: dict[int, str] = field(
        default_factory=lambda: dict(DEFAULT_STATIC_OVERRIDES)
    )

    # -------------------------------------------------------------------------
    # HTTP Service
    # -------------------------------------------------------------------------

    BIND_IP: str = "0.0.0.0"
    PORT: int = 8080

    # -------------------------------------------------------------------------
    # Logging Configuration
    # -------------------------------------------------------------------------

    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_FILE: str = ""

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MonitorConfig":
        """
        Build a configuration from WGLINKMON_* variables.

        Unset variables keep their defaults. List and mapping values use
        comma-separated forms: WGLINKMON_DDNS_RESERVED_IDS="2,7,14" and
        WGLINKMON_STATIC_OVERRIDES="5=172.16.100.26,19=192.168.13.0/24".

        Raises:
            ValueError: If a variable cannot be converted to its field type
        """
        environ = os.environ if environ is None else environ
        instance = cls()

        for f in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{f.name}")
            if raw is None:
                continue

            current = getattr(instance, f.name)
            try:
                if isinstance(current, bool):
                    value = _parse_bool(raw)
                elif isinstance(current, LogLevel):
                    value = LogLevel(raw.strip().lower())
                elif isinstance(current, int):
                    value = int(raw)
                elif isinstance(current, float):
                    value = float(raw)
                elif isinstance(current, list):
                    value = _parse_id_list(raw)
                elif isinstance(current, dict):
                    value = _parse_overrides(raw)
                else:
                    value = raw.strip()
            except ValueError as e:
                raise ValueError(f"Invalid {ENV_PREFIX}{f.name}={raw!r}: {e}")

            setattr(instance, f.name, value)

        return instance

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def build_universe(self) -> AllocationUniverse:
        """
        Get the allocation universe described by this configuration.

        Raises:
            ValueError: If ranges, networks or the LAN template are invalid
        """
        return AllocationUniverse.parse(
            self.ALLOCATION_RANGES,
            tunnel_network=self.TUNNEL_NETWORK,
            management_network=self.MANAGEMENT_NETWORK,
            lan_block_template=self.LAN_BLOCK_TEMPLATE,
            client_prefix=self.CLIENT_PREFIX,
            interface_prefix=self.INTERFACE_PREFIX,
        )

    def build_registry(self) -> ReservationRegistry:
        """
        Get the reservation registry described by this configuration.

        Raises:
            ValueError: If an id is both DDNS reserved and statically overridden
        """
        return ReservationRegistry.from_tables(
            self.DDNS_RESERVED_IDS, self.STATIC_OVERRIDES
        )

    def has_router(self) -> bool:
        """Whether a router URL is configured for live fetching."""
        return bool(self.ROUTER_URL)


# =============================================================================
# Global Instance
# =============================================================================

# Global config instance - loaded from the environment, modify before use
config = MonitorConfig.from_env()
