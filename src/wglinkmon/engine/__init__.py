"""
Peer reconciliation and address-allocation engine.

Re-exports the public entry points:
    from wglinkmon.engine import reconcile, suggest_allocation
    from wglinkmon.engine import ReservationRegistry
"""

from wglinkmon.engine.allocator import (
    classify,
    next_free_id,
    next_free_lan_block,
    next_free_suffix,
    suggest_allocation,
)
from wglinkmon.engine.parser import parse_peer, parse_peers
from wglinkmon.engine.registry import ReservationRegistry
from wglinkmon.engine.report import build_report, filter_rows, reconcile

__all__ = [
    "ReservationRegistry",
    "build_report",
    "classify",
    "filter_rows",
    "next_free_id",
    "next_free_lan_block",
    "next_free_suffix",
    "parse_peer",
    "parse_peers",
    "reconcile",
    "suggest_allocation",
]
