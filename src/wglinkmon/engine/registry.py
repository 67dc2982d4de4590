"""
Reservation registry.

Client ids that are never handed out automatically:

- DDNS reserved: sites reached through dynamic DNS instead of the tunnel.
- Static overrides: sites bound to a fixed LAN value configured by hand
  (a host, a CIDR or a host:port published on the WAN side).

The tables are configuration, fixed for the lifetime of the process.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from wglinkmon.models.enums import ReservationKind
from wglinkmon.models.peer import ReservationEntry


@dataclass(frozen=True)
class ReservationRegistry:
    """Read-only lookup over the DDNS and static-override tables."""

    ddns_reserved: frozenset[int] = frozenset()
    static_overrides: Mapping[int, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        overlap = self.ddns_reserved & set(self.static_overrides)
        if overlap:
            raise ValueError(
                f"Client ids {sorted(overlap)} are both DDNS reserved and "
                f"statically overridden; each id may hold one reservation."
            )

    @classmethod
    def from_tables(
        cls,
        ddns_reserved: Iterable[int] = (),
        static_overrides: Mapping[int, str] | None = None,
    ) -> ReservationRegistry:
        """Build a registry from plain configuration values."""
        return cls(
            ddns_reserved=frozenset(int(i) for i in ddns_reserved),
            static_overrides=MappingProxyType(
                {int(k): str(v) for k, v in (static_overrides or {}).items()}
            ),
        )

    @property
    def ids(self) -> frozenset[int]:
        """Every reserved id, regardless of kind."""
        return self.ddns_reserved | frozenset(self.static_overrides)

    def classify(self, client_id: int | None) -> ReservationKind | None:
        """Get the reservation kind for an id, or None if it is not reserved."""
        if client_id is None:
            return None
        if client_id in self.static_overrides:
            return ReservationKind.STATIC_OVERRIDE
        if client_id in self.ddns_reserved:
            return ReservationKind.DDNS_RESERVED
        return None

    def fixed_lan(self, client_id: int) -> str | None:
        """Get the fixed LAN value of a static override."""
        return self.static_overrides.get(client_id)

    def entries(self) -> list[ReservationEntry]:
        """All reservations, sorted by id."""
        return [
            ReservationEntry(
                client_id=client_id,
                kind=self.classify(client_id),
                fixed_lan=self.fixed_lan(client_id),
            )
            for client_id in sorted(self.ids)
        ]

    def __contains__(self, client_id: object) -> bool:
        return client_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)
