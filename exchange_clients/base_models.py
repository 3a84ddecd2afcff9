"""
Shared data structures for funding sources.

These are the raw, exchange-neutral payloads a source hands to the
collection layer. Rates here are raw fractions exactly as the exchange
reports them; conversion to percent happens in the source adapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional


class UnsupportedSourceError(ValueError):
    """Raised when a funding source name is not registered."""
    pass


@dataclass(frozen=True, slots=True)
class InstrumentInfo:
    """One tradable instrument as listed by a source."""

    symbol: str  # native identifier, e.g. "BTC/USDT:USDT"
    base: Optional[str] = None
    quote: Optional[str] = None
    is_perpetual: bool = False


@dataclass(frozen=True, slots=True)
class FundingSnapshot:
    """Current funding state for one instrument."""

    symbol: str
    funding_rate: Optional[Decimal] = None
    funding_timestamp: Optional[int] = None
    next_funding_timestamp: Optional[int] = None
    funding_datetime: Optional[str] = None
    next_funding_datetime: Optional[str] = None
    mark_price: Optional[Decimal] = None
    index_price: Optional[Decimal] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class FundingHistoryEvent:
    """A past funding settlement."""

    symbol: str
    timestamp: int
    funding_rate: Optional[Decimal] = None


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert an exchange number to Decimal, None when missing or unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value))
    except (ArithmeticError, TypeError, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def to_int(value: Any) -> Optional[int]:
    """Convert an exchange timestamp to int, None when missing or unparseable."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (OverflowError, TypeError, ValueError):
        return None


__all__ = [
    "UnsupportedSourceError",
    "InstrumentInfo",
    "FundingSnapshot",
    "FundingHistoryEvent",
    "to_decimal",
    "to_int",
]
