"""
Logging setup for wg-link-monitor.

All modules log through loguru. Standard library loggers (uvicorn, httpx)
are routed into loguru by an intercept handler so the output shares one
format and one level filter.

Usage:
    from wglinkmon.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Fetched 12 peers")
"""

import logging
import sys

from loguru import logger as _logger

from wglinkmon.models.enums import LogLevel

# LogLevel -> loguru level name
_LEVEL_MAP = {
    LogLevel.FULL: "TRACE",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARNING",
}

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_logger.configure(extra={"name": "wglinkmon"})


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.bind(name=record.name).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    log_file: str = "",
) -> None:
    """
    Install the loguru sinks.

    Args:
        level: Verbosity for all sinks.
        log_file: Optional path of an additional log file (empty = console only).
    """
    loguru_level = _LEVEL_MAP.get(level, "INFO")

    _logger.remove()
    _logger.add(sys.stderr, level=loguru_level, format=_FORMAT, colorize=None)
    if log_file:
        _logger.add(
            log_file,
            level=loguru_level,
            format=_FORMAT,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return _logger.bind(name=name)

