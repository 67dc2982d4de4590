"""
RouterOS REST transport.

Fetches the WireGuard peer table from a MikroTik router:

    GET {ROUTER_URL}/rest/interface/wireguard/peers[?interface=NAME]

Credentials from the configuration are handed to httpx as-is (HTTP basic);
no login or token flow happens here. The fetch is the only part of the
system with latency and failure modes, so every HTTP or network failure is
raised as RouterOSError for the caller to report.
"""

import httpx
from pydantic import TypeAdapter, ValidationError

from wglinkmon.config import MonitorConfig
from wglinkmon.models.peer import RawPeerRecord
from wglinkmon.models.schemas import RouterPeerPayload
from wglinkmon.utils.logger import get_logger

logger = get_logger(__name__)

PEERS_PATH = "/rest/interface/wireguard/peers"

_peer_list = TypeAdapter(list[RouterPeerPayload])


class RouterOSError(Exception):
    """Router request error with status code and detail."""

    def __init__(
        self, message: str, status_code: int | None = None, detail: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _handle_http_error(e: httpx.HTTPStatusError, context: str = "request") -> None:
    """Handle HTTP errors with consistent logging."""
    status = e.response.status_code
    try:
        detail = e.response.json()
        detail_str = detail.get("detail") or detail.get("message") or str(detail)
    except Exception:
        detail_str = e.response.text

    logger.error(f"HTTP {status} on {context}: {detail_str}")
    raise RouterOSError(
        f"HTTP {status}: {detail_str}", status_code=status, detail=detail_str
    )


def parse_peer_payloads(data) -> list[RawPeerRecord]:
    """
    Convert decoded RouterOS JSON into engine records.

    Raises:
        RouterOSError: If the payload is not a list of objects
    """
    try:
        payloads = _peer_list.validate_python(data)
    except ValidationError as e:
        raise RouterOSError(f"Unexpected peer list format: {e.error_count()} error(s)")
    return [payload.to_record() for payload in payloads]


class RouterOSClient:
    """Thin synchronous client for the RouterOS REST API."""

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        verify_tls: bool = True,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Router URL, e.g. "https://router.example.net"
            username: HTTP basic username (empty = no credentials sent)
            password: HTTP basic password
            verify_tls: Verify the router's TLS certificate
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if not base_url:
            raise RouterOSError("Router URL is not configured")

        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            auth=(username, password) if username else None,
            verify=verify_tls,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_config(
        cls,
        config: MonitorConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> "RouterOSClient":
        """Create a client from the router settings of a configuration."""
        return cls(
            base_url=config.ROUTER_URL,
            username=config.ROUTER_USERNAME,
            password=config.ROUTER_PASSWORD,
            verify_tls=config.ROUTER_VERIFY_TLS,
            timeout=config.ROUTER_TIMEOUT_SECONDS,
            transport=transport,
        )

    def fetch_peers(self, interface: str = "") -> list[RawPeerRecord]:
        """
        Fetch the WireGuard peers.

        Args:
            interface: Only return peers of this WireGuard interface (empty = all)

        Returns:
            Raw peer records in router order

        Raises:
            RouterOSError: On HTTP errors, network errors or malformed payloads
        """
        params = {"interface": interface} if interface else None

        try:
            response = self._client.get(PEERS_PATH, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            _handle_http_error(e, "fetch peers")
        except httpx.RequestError as e:
            logger.error(f"Request error: {e}")
            raise RouterOSError(f"Network error: {e}")
        except ValueError as e:
            raise RouterOSError(f"Router returned invalid JSON: {e}")

        records = parse_peer_payloads(data)
        logger.info(f"Fetched {len(records)} peers from {self.base_url}")
        return records

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RouterOSClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def fetch_peers(
    config: MonitorConfig,
    transport: httpx.BaseTransport | None = None,
) -> list[RawPeerRecord]:
    """Fetch peers using the router settings of a configuration."""
    with RouterOSClient.from_config(config, transport=transport) as client:
        return client.fetch_peers(interface=config.ROUTER_INTERFACE)
