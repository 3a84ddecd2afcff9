"""
Fetch-run status models
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from funding_rate_service.models.funding_record import FundingRecord


class SourceStatus(str, Enum):
    """Terminal state of one source within a fetch run"""
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"


class SourceOutcome(BaseModel):
    """What one source contributed to a fetch run"""
    exchange: str
    status: SourceStatus
    records: List[FundingRecord] = Field(default_factory=list)
    latency_ms: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == SourceStatus.COMPLETED


class FetchRunResult(BaseModel):
    """All sources of one fetch run, in configured order"""
    outcomes: List[SourceOutcome] = Field(default_factory=list)
    duration_ms: int = 0

    @property
    def records_by_source(self) -> Dict[str, List[FundingRecord]]:
        return {outcome.exchange: outcome.records for outcome in self.outcomes}

    @property
    def all_records(self) -> List[FundingRecord]:
        return [record for outcome in self.outcomes for record in outcome.records]
