"""wg-link-monitor: WireGuard peer reconciliation and address allocation."""

__version__ = "0.3.0"
