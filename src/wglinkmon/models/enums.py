"""
Enumeration types for wg-link-monitor.

This module defines the enumeration types used for peer classification,
reservation bookkeeping and configuration options.
"""

from enum import Enum


# =============================================================================
# Peer-Related Enums
# =============================================================================


class PeerStatus(str, Enum):
    """
    Classification of a row in the reconciliation report.

    Precedence when a peer matches more than one:
        STATIC_OVERRIDE > RESERVED_DDNS > ACTIVE/INACTIVE

    AVAILABLE only appears on synthesized placeholder rows.
    """

    ACTIVE = "active"  # Handshake within the last hour
    INACTIVE = "inactive"  # No handshake, or an hour or more ago
    RESERVED_DDNS = "reserved-ddns"  # Id withheld for DDNS-based access
    STATIC_OVERRIDE = "static-override"  # Id bound to a manual LAN value
    AVAILABLE = "available"  # Unused id with a proposed allocation


class ReservationKind(str, Enum):
    """Kind of permanent reservation held by the registry."""

    DDNS_RESERVED = "reserved-ddns"
    STATIC_OVERRIDE = "static-override"

    @property
    def status(self) -> PeerStatus:
        """The report status this reservation maps to."""
        return PeerStatus(self.value)


class RowSource(str, Enum):
    """
    Origin of a report row.

    - PEER: parsed from a router record
    - REGISTRY: reservation with no matching peer
    - PLACEHOLDER: unused id with a simulated next allocation
    """

    PEER = "peer"
    REGISTRY = "registry"
    PLACEHOLDER = "placeholder"


# =============================================================================
# Configuration Enums
# =============================================================================


class LogLevel(str, Enum):
    """
    Logging verbosity levels.

    Levels (from most to least verbose):
        - FULL: Complete trace including per-record parse details
        - DEBUG: Debug messages and above
        - INFO: Informational messages and above
        - WARNING: Only warnings and errors
    """

    FULL = "full"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"


class OutputFormat(str, Enum):
    """CLI output format."""

    TABLE = "table"
    JSON = "json"
