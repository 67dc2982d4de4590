"""
wg-link-monitor FastAPI Application.

Serves the reconciliation engine over HTTP for dashboards and scripts.

Responsibilities:
    - Reconciliation report of the WireGuard peer table
    - Next free client id / tunnel address / LAN block
    - Reservation table
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from wglinkmon import __version__
from wglinkmon.config import config
from wglinkmon.host.endpoints import report
from wglinkmon.models.enums import LogLevel
from wglinkmon.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


# =============================================================================
# Application Setup
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration once so bad settings fail at boot."""
    universe = config.build_universe()
    registry = config.build_registry()
    logger.info(
        f"Allocation universe {universe}, {len(registry)} reserved ids, "
        f"router: {config.ROUTER_URL or 'not configured'}"
    )
    yield
    logger.info("Service stopped")


app = FastAPI(
    title="wg-link-monitor",
    description="WireGuard peer reconciliation and address allocation",
    version=__version__,
    lifespan=lifespan,
)

# Include API routers (all under /api prefix)
app.include_router(report.router, prefix="/api", tags=["Reconciliation"])


# =============================================================================
# Server Entry Points
# =============================================================================


def run(host: str | None = None, port: int | None = None):
    """Run the service using uvicorn."""
    import uvicorn

    # Configure logging before starting uvicorn
    configure_logging(config.LOG_LEVEL, config.LOG_FILE)

    # Map log levels to uvicorn levels
    uvicorn_level_map = {
        LogLevel.FULL: "debug",
        LogLevel.DEBUG: "debug",
        LogLevel.INFO: "info",
        LogLevel.WARNING: "warning",
    }
    uvicorn_level = uvicorn_level_map.get(config.LOG_LEVEL, "info")

    bind_ip = host or config.BIND_IP
    bind_port = port or config.PORT
    logger.info(f"Starting service on {bind_ip}:{bind_port}")

    uvicorn.run(
        app,
        host=bind_ip,
        port=bind_port,
        log_level=uvicorn_level,
        log_config=None,  # Keep uvicorn on the loguru intercept handler
    )


def main():
    """Entry point for the service."""
    run()


if __name__ == "__main__":
    main()
