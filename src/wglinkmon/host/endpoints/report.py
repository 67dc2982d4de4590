"""
Reconciliation Endpoints.

Serves the reconciliation report, the next-allocation suggestion and the
reservation table. Peers come either from the configured router (GET) or
from the request body (POST), so the same engine backs both a live
dashboard and batch callers that already hold an export.
"""

import asyncio

from fastapi import APIRouter, HTTPException, Query

from wglinkmon.config import config
from wglinkmon.engine import filter_rows, reconcile, suggest_allocation
from wglinkmon.host.services.routeros import RouterOSError, fetch_peers
from wglinkmon.models.enums import PeerStatus
from wglinkmon.models.peer import RawPeerRecord, ReconciliationReport
from wglinkmon.models.schemas import (
    ReportResponse,
    ReservationResponse,
    RouterPeerPayload,
    SuggestionResponse,
)
from wglinkmon.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Helpers
# =============================================================================


async def _fetch_router_peers() -> list[RawPeerRecord]:
    """Fetch peers from the router without blocking the event loop."""
    if not config.has_router():
        raise HTTPException(status_code=503, detail="Router URL is not configured.")

    try:
        return await asyncio.to_thread(fetch_peers, config)
    except RouterOSError as e:
        logger.error(f"Router fetch failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))


def _build_report(records: list[RawPeerRecord]) -> ReconciliationReport:
    return reconcile(records, config.build_registry(), config.build_universe())


def _parse_status(status: str | None) -> str | None:
    if status is None or status == "all":
        return status
    try:
        return PeerStatus(status).value
    except ValueError:
        valid = ", ".join(["all", *(s.value for s in PeerStatus)])
        raise HTTPException(
            status_code=422, detail=f"Invalid status '{status}'. Valid: {valid}"
        )


def _report_response(
    records: list[RawPeerRecord],
    search: str | None,
    status: str | None,
) -> ReportResponse:
    report = _build_report(records)
    rows = filter_rows(report.rows, search=search, status=_parse_status(status))
    return ReportResponse.from_report(report, rows=rows)


def _suggestion_response(records: list[RawPeerRecord]) -> SuggestionResponse:
    suggestion = suggest_allocation(_build_report(records), config.build_universe())
    if suggestion is None:
        raise HTTPException(status_code=404, detail="No client id is available.")
    return SuggestionResponse.from_suggestion(suggestion)


# =============================================================================
# Health
# =============================================================================


@router.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


# =============================================================================
# Report
# =============================================================================


@router.get("/report", response_model=ReportResponse)
async def get_report(
    search: str | None = Query(None, description="Match name, IP or comment"),
    status: str | None = Query(None, description="Status filter or 'all'"),
):
    """Build the report from the peers currently on the router."""
    records = await _fetch_router_peers()
    return _report_response(records, search, status)


@router.post("/report", response_model=ReportResponse)
async def post_report(
    peers: list[RouterPeerPayload],
    search: str | None = Query(None, description="Match name, IP or comment"),
    status: str | None = Query(None, description="Status filter or 'all'"),
):
    """Build the report from peers supplied in the request body."""
    logger.debug(f"Reconciling {len(peers)} posted peers")
    return _report_response([p.to_record() for p in peers], search, status)


# =============================================================================
# Suggestion
# =============================================================================


@router.get("/suggestion", response_model=SuggestionResponse)
async def get_suggestion():
    """Next free client id, tunnel address and LAN block from the router."""
    records = await _fetch_router_peers()
    return _suggestion_response(records)


@router.post("/suggestion", response_model=SuggestionResponse)
async def post_suggestion(peers: list[RouterPeerPayload]):
    """Next free client id, tunnel address and LAN block for posted peers."""
    return _suggestion_response([p.to_record() for p in peers])


# =============================================================================
# Reservations
# =============================================================================


@router.get("/reservations", response_model=list[ReservationResponse])
async def get_reservations():
    """Reserved client ids, sorted by id."""
    return [
        ReservationResponse.from_entry(entry)
        for entry in config.build_registry().entries()
    ]
