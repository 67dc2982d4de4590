"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from wglinkmon import __version__
from wglinkmon.cli.main import app
from wglinkmon.cli.output import print_error

runner = CliRunner()

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
]


@pytest.fixture
def export_file(tmp_path, default_config):
    path = tmp_path / "peers.json"
    path.write_text(json.dumps(PEERS), encoding="utf-8")
    return path


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_report_table(export_file) -> None:
    result = runner.invoke(app, ["peers", "report", "--input", str(export_file)])

    assert result.exit_code == 0
    assert "WireGuard Links" in result.output
    assert "Summary" in result.output


def test_report_json_with_status_filter(export_file) -> None:
    result = runner.invoke(
        app,
        ["--format", "json", "peers", "report", "-i", str(export_file), "-s", "active"],
    )

    assert result.exit_code == 0
    assert '"name": "MC01-CENTRAL"' in result.output
    assert "WIREGUARD-MC03" not in result.output


def test_report_rejects_unknown_status(export_file) -> None:
    result = runner.invoke(
        app, ["peers", "report", "--input", str(export_file), "--status", "sleeping"]
    )

    assert result.exit_code == 1


def test_suggest_json(export_file) -> None:
    result = runner.invoke(
        app, ["--format", "json", "peers", "suggest", "--input", str(export_file)]
    )

    assert result.exit_code == 0
    assert '"client_name": "MC04"' in result.output
    assert '"lan_block": "192.168.14.0/24"' in result.output


def test_suggest_panel(export_file) -> None:
    result = runner.invoke(app, ["peers", "suggest", "--input", str(export_file)])

    assert result.exit_code == 0
    assert "Next Available" in result.output
    assert "MC04" in result.output


def test_invalid_export_file(tmp_path, default_config) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["peers", "report", "--input", str(path)])

    assert result.exit_code == 1


def test_report_without_input_or_router(default_config) -> None:
    result = runner.invoke(app, ["peers", "report"])

    assert result.exit_code == 1


def test_reservations_json(default_config) -> None:
    result = runner.invoke(app, ["--format", "json", "peers", "reservations"])

    assert result.exit_code == 0
    assert '"kind": "static-override"' in result.output


def test_config_show_and_check(default_config) -> None:
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "Current Configuration" in result.output

    result = runner.invoke(app, ["config", "check"])
    assert result.exit_code == 0
    assert "Configuration OK" in result.output


def test_report_renders_bracketed_router_text(tmp_path, default_config) -> None:
    """Names and comments with square brackets are shown literally."""
    path = tmp_path / "peers.json"
    path.write_text(
        json.dumps(
            [
                {
                    "name": "site [/old]",
                    "comment": "[bold]x",
                    "allowed-address": "100.100.100.9/32",
                },
                {"name": "MC07-[red]", "allowed-address": "100.100.100.10/32"},
                {"name": "MC07-B", "allowed-address": "100.100.100.11/32,[lan]"},
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(
        app, ["peers", "report", "--input", str(path), "--search", "["]
    )

    assert result.exit_code == 0
    assert "[/old]" in result.output
    assert "[bold]x" in result.output
    assert "MC07-[red]" in result.output
    assert "(dup)" in result.output


def test_error_message_with_brackets(capsys) -> None:
    print_error("HTTP 400: closing tag [/old]")

    assert "[/old]" in capsys.readouterr().err
