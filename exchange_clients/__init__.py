"""
Shared Exchange Clients Library

Read-only funding data sources for perpetual futures exchanges.

Modules:
    - base_source: Capability interface (BaseFundingSource)
    - base_models: Shared dataclasses/utilities
    - ccxt_source: ccxt-backed implementation
    - factory: Name -> source construction
"""

from .base_source import BaseFundingSource
from .base_models import (
    FundingHistoryEvent,
    FundingSnapshot,
    InstrumentInfo,
    UnsupportedSourceError,
    to_decimal,
    to_int,
)

__all__ = [
    "BaseFundingSource",
    "FundingHistoryEvent",
    "FundingSnapshot",
    "InstrumentInfo",
    "UnsupportedSourceError",
    "to_decimal",
    "to_int",
]
