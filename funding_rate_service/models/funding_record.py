"""
Normalized funding record models
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Exchange(str, Enum):
    """Supported funding sources"""
    BINANCE = "binance"
    MEXC = "mexc"


class IntervalMethod(str, Enum):
    """How a funding interval was obtained"""
    REPORTED = "reported"
    TIMESTAMP_PAIR = "timestamp_pair"
    DATETIME_PAIR = "datetime_pair"
    HISTORY = "history"
    HEURISTIC = "heuristic"


class FundingRecord(BaseModel):
    """
    One instrument on one source, normalized.

    Records are immutable; the pipeline builds new ones instead of
    updating fields in place.
    """
    model_config = ConfigDict(frozen=True)

    exchange: str = Field(..., description="Source name; built-ins are listed in Exchange, others can be registered")
    symbol: str = Field(..., description="Canonical base asset, e.g. BTC or 1000PEPE")
    source_symbol: str = Field(..., description="Native instrument id, e.g. BTC/USDT:USDT")

    funding_rate: Optional[Decimal] = Field(
        None,
        description="Funding rate in percent; None when the source provides none"
    )
    funding_timestamp: Optional[int] = None
    next_funding_timestamp: Optional[int] = None
    funding_datetime: Optional[str] = None
    next_funding_datetime: Optional[str] = None

    funding_interval_hours: int = Field(..., gt=0, le=24)
    interval_source: IntervalMethod

    mark_price: Optional[Decimal] = None
    index_price: Optional[Decimal] = None

    @property
    def has_rate(self) -> bool:
        return self.funding_rate is not None
