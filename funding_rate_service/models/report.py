"""
Report payload handed to the HTTP layer and the CLI
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from funding_rate_service.models.comparison import ComparisonEntry
from funding_rate_service.models.funding_record import FundingRecord
from funding_rate_service.models.system import SourceStatus


class SourceReport(BaseModel):
    """Per-source run status"""
    status: SourceStatus
    count: int
    latency_ms: int
    error: Optional[str] = None


class FundingSummary(BaseModel):
    """
    Aggregate statistics over all records.

    Records without a funding rate are left out of every figure here.
    """
    highest_funding_rate: Optional[FundingRecord] = None
    lowest_funding_rate: Optional[FundingRecord] = None
    average_funding_rate: Optional[Decimal] = None
    rated_contracts: int = 0


class FundingReport(BaseModel):
    """Complete result of one aggregation run"""
    success: bool = True
    timestamp: datetime
    fetch_duration_ms: int
    total_contracts: int

    exchanges: Dict[str, int] = Field(default_factory=dict, description="exchange -> record count")
    sources: Dict[str, SourceReport] = Field(default_factory=dict)
    funding_intervals: Dict[str, int] = Field(default_factory=dict, description="'8H' -> count")

    comparison: List[ComparisonEntry] = Field(default_factory=list)
    comparison_fallback: bool = False

    summary: FundingSummary = Field(default_factory=FundingSummary)
    data: Dict[str, List[FundingRecord]] = Field(default_factory=dict)
