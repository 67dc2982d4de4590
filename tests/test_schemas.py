"""Tests for the RouterOS payload and response models."""

from wglinkmon.engine import reconcile
from wglinkmon.models.enums import PeerStatus, ReservationKind
from wglinkmon.models.schemas import (
    ReportResponse,
    ReservationResponse,
    RouterPeerPayload,
)


def test_router_payload_uses_routeros_keys() -> None:
    payload = RouterPeerPayload.model_validate(
        {
            ".id": "*1A",
            "name": "MC05-CENTRAL",
            "comment": "Central office",
            "allowed-address": "100.100.100.5/32,192.168.15.0/24",
            "last-handshake": "1m3s",
            "disabled": "true",
            "current-endpoint-address": "203.0.113.7",
            "interface": "wg-monitor",
            "public-key": "ignored",
        }
    )
    record = payload.to_record()

    assert record.provider_id == "*1A"
    assert record.name == "MC05-CENTRAL"
    assert record.comment == "Central office"
    assert record.allowed_address == "100.100.100.5/32,192.168.15.0/24"
    assert record.last_handshake == "1m3s"
    assert record.disabled is True
    assert record.endpoint_address == "203.0.113.7"
    assert record.interface == "wg-monitor"


def test_router_payload_coerces_odd_values() -> None:
    payload = RouterPeerPayload.model_validate(
        {
            "name": 12,
            "allowed-address": ["100.100.100.5/32", "192.168.15.0/24"],
            "disabled": "false",
        }
    )
    record = payload.to_record()

    assert record.name == "12"
    assert record.allowed_address == "100.100.100.5/32,192.168.15.0/24"
    assert record.disabled is False
    assert record.last_handshake is None
    assert record.comment == ""


def test_router_payload_accepts_field_names() -> None:
    payload = RouterPeerPayload(name="MC07", allowed_address="100.100.100.7/32")
    assert payload.to_record().allowed_address == "100.100.100.7/32"


def test_report_response(universe, default_registry, site_records) -> None:
    report = reconcile(site_records, default_registry, universe)
    response = ReportResponse.from_report(report)
    data = response.model_dump(mode="json")

    assert len(data["rows"]) == report.stats.total
    assert data["rows"][0]["name"] == "MC01-CENTRAL"
    assert data["rows"][0]["status"] == PeerStatus.ACTIVE.value
    assert data["rows"][0]["lan_ranges"] == ["192.168.10.0/24"]
    assert data["stats"]["available"] == -1
    assert data["stats"]["duplicate_ids"] == []


def test_report_response_with_filtered_rows(universe, default_registry) -> None:
    report = reconcile([], default_registry, universe)
    response = ReportResponse.from_report(report, rows=report.rows[:2])

    assert [row.client_id for row in response.rows] == [1, 2]
    assert response.stats.total == 200


def test_reservation_response(default_registry) -> None:
    entry = default_registry.entries()[1]
    response = ReservationResponse.from_entry(entry)

    assert response.client_id == 5
    assert response.kind == ReservationKind.STATIC_OVERRIDE
    assert response.fixed_lan == "172.16.100.26"
