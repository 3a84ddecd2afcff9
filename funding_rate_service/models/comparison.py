"""
Cross-exchange comparison models
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from funding_rate_service.models.funding_record import FundingRecord


EQUAL = "equal"


class DifferentialBand(str, Enum):
    """Size class of an absolute rate differential"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNAVAILABLE = "unavailable"


class SourceProjection(BaseModel):
    """The slice of a FundingRecord shown in a comparison row"""
    exchange: str
    source_symbol: str
    funding_rate: Optional[Decimal] = None
    funding_interval_hours: int
    next_funding_timestamp: Optional[int] = None
    mark_price: Optional[Decimal] = None

    @classmethod
    def from_record(cls, record: FundingRecord) -> "SourceProjection":
        return cls(
            exchange=record.exchange,
            source_symbol=record.source_symbol,
            funding_rate=record.funding_rate,
            funding_interval_hours=record.funding_interval_hours,
            next_funding_timestamp=record.next_funding_timestamp,
            mark_price=record.mark_price,
        )


class ComparisonEntry(BaseModel):
    """
    One symbol in the comparison table.

    ``sources`` holds a projection per configured source, or None when the
    symbol is unavailable on that source.
    """
    symbol: str
    sources: Dict[str, Optional[SourceProjection]]

    first_exchange: Optional[str] = None
    second_exchange: Optional[str] = None
    differential: Optional[Decimal] = Field(
        None,
        description="rate(second_exchange) - rate(first_exchange), percent"
    )
    abs_differential: Optional[Decimal] = None
    band: DifferentialBand = DifferentialBand.UNAVAILABLE
    favorable_exchange: Optional[str] = Field(
        None,
        description="Exchange with the higher rate, or 'equal' on a tie"
    )
    is_fallback: bool = False


class ComparisonResult(BaseModel):
    """Output of one reconciliation pass"""
    entries: List[ComparisonEntry] = Field(default_factory=list)
    merged: Dict[str, Dict[str, Optional[SourceProjection]]] = Field(default_factory=dict)
    fallback_used: bool = False
