"""
Health API Routes
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from funding_rate_service.config import settings


router = APIRouter()


@router.get("/health")
async def get_service_health() -> Dict[str, Any]:
    """Static service status and the configured sources"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "sources": settings.enabled_sources,
        "ticker_only_sources": settings.ticker_only_sources,
        "source_timeout_seconds": settings.source_timeout_seconds,
    }
