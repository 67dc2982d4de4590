"""Shared fixtures for wg-link-monitor tests."""

import pytest

from wglinkmon.config import (
    DEFAULT_DDNS_RESERVED_IDS,
    DEFAULT_STATIC_OVERRIDES,
    config,
)
from wglinkmon.engine.registry import ReservationRegistry
from wglinkmon.models.peer import RawPeerRecord
from wglinkmon.models.universe import AllocationUniverse


def make_record(
    name: str = "",
    allowed_address: str = "",
    last_handshake: str | None = None,
    comment: str = "",
    **kwargs,
) -> RawPeerRecord:
    """Build a raw router record with sensible defaults."""
    return RawPeerRecord(
        name=name,
        comment=comment,
        allowed_address=allowed_address,
        last_handshake=last_handshake,
        **kwargs,
    )


@pytest.fixture
def universe() -> AllocationUniverse:
    return AllocationUniverse.default()


@pytest.fixture
def empty_registry() -> ReservationRegistry:
    return ReservationRegistry()


@pytest.fixture
def default_registry() -> ReservationRegistry:
    return ReservationRegistry.from_tables(
        DEFAULT_DDNS_RESERVED_IDS, DEFAULT_STATIC_OVERRIDES
    )


@pytest.fixture
def site_records() -> list[RawPeerRecord]:
    """Two named sites and one peer that does not follow the naming scheme."""
    return [
        make_record(
            "MC01-CENTRAL",
            "100.100.100.2/32,192.168.10.0/24",
            "1m12s",
            provider_id="*1",
        ),
        make_record(
            "WIREGUARD-MC03",
            "100.100.100.3/32,192.168.12.0/24",
            "2d4h",
            provider_id="*2",
        ),
        make_record("backup-link", "100.100.100.50/32", provider_id="*3"),
    ]


@pytest.fixture
def default_config(monkeypatch):
    """Reset the global configuration to defaults for one test."""
    monkeypatch.setattr(config, "ROUTER_URL", "")
    monkeypatch.setattr(config, "ROUTER_INTERFACE", "")
    monkeypatch.setattr(config, "ALLOCATION_RANGES", AllocationUniverse.DEFAULT_RANGES)
    monkeypatch.setattr(config, "TUNNEL_NETWORK", "100.100.100.0/24")
    monkeypatch.setattr(config, "MANAGEMENT_NETWORK", "172.16.100.0/24")
    monkeypatch.setattr(config, "LAN_BLOCK_TEMPLATE", "192.168.{n}.0/24")
    monkeypatch.setattr(config, "CLIENT_PREFIX", "MC")
    monkeypatch.setattr(config, "INTERFACE_PREFIX", "WIREGUARD-")
    monkeypatch.setattr(config, "DDNS_RESERVED_IDS", list(DEFAULT_DDNS_RESERVED_IDS))
    monkeypatch.setattr(config, "STATIC_OVERRIDES", dict(DEFAULT_STATIC_OVERRIDES))
    return config


@pytest.fixture
def record():
    """Factory for raw router records."""
    return make_record
