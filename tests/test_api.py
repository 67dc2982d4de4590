"""Tests for the HTTP service."""

import pytest
from fastapi.testclient import TestClient

from wglinkmon.host.app import app
from wglinkmon.host.endpoints import report as report_endpoints
from wglinkmon.host.services.routeros import RouterOSError

PEERS = [
    {
        ".id": "*1",
        "name": "MC01-CENTRAL",
        "allowed-address": "100.100.100.2/32,192.168.10.0/24",
        "last-handshake": "1m12s",
    },
    {
        ".id": "*2",
        "name": "WIREGUARD-MC03",
        "allowed-address": "100.100.100.3/32,192.168.12.0/24",
        "last-handshake": "2d4h",
    },
    {".id": "*3", "name": "backup-link", "allowed-address": "100.100.100.50/32"},
]


@pytest.fixture
def client(default_config):
    with TestClient(app) as test_client:
        yield test_client


def test_health(client) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_post_report(client) -> None:
    response = client.post("/api/report", json=PEERS)

    assert response.status_code == 200
    data = response.json()
    assert data["stats"]["total"] == 201
    assert data["stats"]["active"] == 1
    assert data["rows"][0]["name"] == "MC01-CENTRAL"
    assert data["rows"][-1]["name"] == "backup-link"
    assert data["rows"][-1]["client_id"] is None


def test_post_report_with_filters(client) -> None:
    response = client.post(
        "/api/report", params={"status": "reserved-ddns"}, json=PEERS
    )
    rows = response.json()["rows"]

    assert response.status_code == 200
    assert len(rows) == 9
    assert {row["status"] for row in rows} == {"reserved-ddns"}

    response = client.post("/api/report", params={"search": "backup"}, json=PEERS)
    assert [row["name"] for row in response.json()["rows"]] == ["backup-link"]


def test_post_report_rejects_unknown_status(client) -> None:
    response = client.post("/api/report", params={"status": "sleeping"}, json=PEERS)
    assert response.status_code == 422


def test_post_suggestion(client) -> None:
    response = client.post("/api/suggestion", json=PEERS)

    assert response.status_code == 200
    assert response.json() == {
        "client_id": 4,
        "client_name": "MC04",
        "tunnel_suffix": 4,
        "tunnel_address": "100.100.100.4",
        "lan_block": "192.168.14.0/24",
        "lan_prefix": "192.168.14",
    }


def test_suggestion_not_found_when_ids_exhausted(client, monkeypatch) -> None:
    monkeypatch.setattr(report_endpoints.config, "ALLOCATION_RANGES", "1-2/2-253/10-209")
    monkeypatch.setattr(report_endpoints.config, "DDNS_RESERVED_IDS", [2])
    monkeypatch.setattr(report_endpoints.config, "STATIC_OVERRIDES", {})

    response = client.post("/api/suggestion", json=PEERS[:1])

    assert response.status_code == 404


def test_reservations(client) -> None:
    response = client.get("/api/reservations")
    data = response.json()

    assert response.status_code == 200
    assert len(data) == 17
    assert data[0] == {"client_id": 2, "kind": "reserved-ddns", "fixed_lan": None}
    assert data[1] == {
        "client_id": 5,
        "kind": "static-override",
        "fixed_lan": "172.16.100.26",
    }


def test_get_report_without_router(client) -> None:
    response = client.get("/api/report")
    assert response.status_code == 503


def test_get_report_from_router(client, monkeypatch, site_records) -> None:
    monkeypatch.setattr(report_endpoints.config, "ROUTER_URL", "https://router.test")
    monkeypatch.setattr(report_endpoints, "fetch_peers", lambda cfg: site_records)

    response = client.get("/api/report")
    assert response.status_code == 200
    assert response.json()["stats"]["total"] == 201

    response = client.get("/api/suggestion")
    assert response.status_code == 200
    assert response.json()["client_name"] == "MC04"


def test_router_failure_maps_to_bad_gateway(client, monkeypatch) -> None:
    def failing_fetch(cfg):
        raise RouterOSError("HTTP 401: Unauthorized", status_code=401)

    monkeypatch.setattr(report_endpoints.config, "ROUTER_URL", "https://router.test")
    monkeypatch.setattr(report_endpoints, "fetch_peers", failing_fetch)

    response = client.get("/api/report")

    assert response.status_code == 502
    assert "Unauthorized" in response.json()["detail"]
