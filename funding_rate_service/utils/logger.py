"""
Logging configuration for Funding Rate Service

All service components share one loguru-backed UnifiedLogger.
"""

import logging

from helpers.unified_logger import get_service_logger

from funding_rate_service.config import settings


def _configure_external_loggers() -> None:
    """Limit noisy third-party loggers (ccxt transport, HTTP clients)."""
    http_level = getattr(logging, settings.http_log_level.upper(), logging.WARNING)
    for name in ("ccxt", "ccxt.base.exchange", "urllib3", "httpx", "asyncio"):
        logger_obj = logging.getLogger(name)
        logger_obj.setLevel(http_level)
        if http_level >= logging.WARNING:
            logger_obj.propagate = False


_configure_external_loggers()

logger = get_service_logger(
    "funding_rate_service",
    log_level=settings.log_level,
    log_to_file=settings.log_to_file,
)
