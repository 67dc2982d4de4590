"""
Pydantic models for the wire formats.

Model Categories:
    - Router Input: WireGuard peers as returned by the RouterOS REST API
      (GET /rest/interface/wireguard/peers) or exported to a JSON file
    - Report Responses: reconciliation report rows and counts
    - Suggestion Responses: pre-fill values for a new site
    - Reservation Responses: the reservation table
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wglinkmon.models.enums import PeerStatus, ReservationKind, RowSource
from wglinkmon.models.peer import (
    AllocationSuggestion,
    RawPeerRecord,
    ReconciliationReport,
    ReservationEntry,
)


# =============================================================================
# Router Input Models
# =============================================================================


class RouterPeerPayload(BaseModel):
    """
    One WireGuard peer in RouterOS REST notation.

    RouterOS keys use dashes and a leading dot for the internal id, and
    encode booleans as "true"/"false" strings. Unknown keys (public-key,
    rx, tx, ...) are ignored. Values of unexpected types are coerced to
    text instead of rejected so one odd record cannot fail a whole fetch.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    provider_id: str = Field(default="", alias=".id")
    name: str | None = None
    comment: str | None = None
    allowed_address: str | None = Field(default=None, alias="allowed-address")
    last_handshake: str | None = Field(default=None, alias="last-handshake")
    disabled: bool = False
    endpoint_address: str | None = Field(
        default=None, alias="current-endpoint-address"
    )
    interface: str | None = None

    @field_validator(
        "name",
        "comment",
        "allowed_address",
        "last_handshake",
        "endpoint_address",
        "interface",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return str(value)

    @field_validator("provider_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("disabled", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return bool(value)

    def to_record(self) -> RawPeerRecord:
        """Convert to the engine's input record."""
        return RawPeerRecord(
            name=self.name or "",
            comment=self.comment or "",
            allowed_address=self.allowed_address or "",
            last_handshake=self.last_handshake or None,
            disabled=self.disabled,
            provider_id=self.provider_id,
            endpoint_address=self.endpoint_address or "",
            interface=self.interface or "",
        )


# =============================================================================
# Report Response Models
# =============================================================================


class ReportRowResponse(BaseModel):
    """One report row."""

    model_config = ConfigDict(from_attributes=True)

    client_id: int | None
    name: str
    status: PeerStatus
    source: RowSource
    tunnel_address: str | None = None
    tunnel_suffix: int | None = None
    lan_ranges: list[str] = Field(default_factory=list)
    last_handshake: str
    comment: str
    endpoint_address: str
    provider_id: str = ""
    duplicate: bool = False


class ReportStatsResponse(BaseModel):
    """Summary counts of a report."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    active: int
    inactive: int
    reserved_ddns: int
    static_override: int
    available_rows: int = Field(
        ..., description="Number of rows with status 'available'"
    )
    available: int = Field(
        ..., description="Id capacity minus total rows (can be zero or negative)"
    )
    duplicate_ids: list[int] = Field(default_factory=list)


class ReportResponse(BaseModel):
    """Reconciliation report: rows in display order plus counts."""

    rows: list[ReportRowResponse]
    stats: ReportStatsResponse

    @classmethod
    def from_report(
        cls,
        report: ReconciliationReport,
        rows=None,
    ) -> "ReportResponse":
        """Build a response, optionally with a filtered subset of rows."""
        selected = report.rows if rows is None else rows
        return cls(
            rows=[ReportRowResponse.model_validate(row) for row in selected],
            stats=ReportStatsResponse.model_validate(report.stats),
        )


# =============================================================================
# Suggestion / Reservation Response Models
# =============================================================================


class SuggestionResponse(BaseModel):
    """Next free client id, tunnel address and LAN block."""

    model_config = ConfigDict(from_attributes=True)

    client_id: int
    client_name: str
    tunnel_suffix: int
    tunnel_address: str
    lan_block: str
    lan_prefix: str

    @classmethod
    def from_suggestion(cls, suggestion: AllocationSuggestion) -> "SuggestionResponse":
        return cls.model_validate(suggestion)


class ReservationResponse(BaseModel):
    """One reserved client id."""

    model_config = ConfigDict(from_attributes=True)

    client_id: int
    kind: ReservationKind
    fixed_lan: str | None = None

    @classmethod
    def from_entry(cls, entry: ReservationEntry) -> "ReservationResponse":
        return cls.model_validate(entry)
