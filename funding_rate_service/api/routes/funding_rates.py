"""
Funding Rates API Routes

Live cross-exchange funding rate comparison.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from funding_rate_service.core.comparison_service import FundingComparisonService
from funding_rate_service.core.dependencies import get_comparison_service


router = APIRouter()


@router.get("/funding-rates")
async def get_funding_rates(
    service: FundingComparisonService = Depends(get_comparison_service)
) -> Dict[str, Any]:
    """
    Fetch funding rates from every configured exchange and compare them

    Runs a full aggregation on each request. Sources that fail or time out
    are reported with an empty record list instead of failing the request.
    """
    report = await service.run()
    return report.model_dump(mode="json")
