"""Base interface for funding sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from .base_models import FundingHistoryEvent, FundingSnapshot, InstrumentInfo


class BaseFundingSource(ABC):
    """
    Capability interface of one exchange feed.

    The collection layer only ever talks to an exchange through these four
    calls. Each call may fail independently; the caller decides how failures
    degrade.

    Not every exchange exposes every capability. A source without a
    funding-rate endpoint reports ``supports_funding_snapshot = False`` and
    is still usable through ``fetch_ticker``. That is an expected state, not
    an error.

    Implementation Pattern:

        ```python
        class MyFundingSource(BaseFundingSource):
            async def list_instruments(self):
                return [InstrumentInfo("BTC/USDT:USDT", "BTC", "USDT", True)]
            ...
        ```
    """

    def __init__(self, name: str):
        """
        Args:
            name: Source name (e.g., "binance", "mexc")
        """
        self.name = name.lower()

    @property
    def supports_funding_snapshot(self) -> bool:
        """Whether ``fetch_funding_snapshot`` is available."""
        return True

    @property
    def supports_funding_history(self) -> bool:
        """Whether ``fetch_funding_history`` is available."""
        return True

    @abstractmethod
    async def list_instruments(self) -> Sequence[InstrumentInfo]:
        """Return every instrument the exchange lists."""
        pass

    @abstractmethod
    async def fetch_funding_snapshot(self) -> Dict[str, FundingSnapshot]:
        """
        Fetch the current funding state of all perpetual instruments.

        Returns:
            Mapping of native instrument symbol to snapshot
        """
        pass

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Optional[Decimal]:
        """Return the last traded price of one instrument."""
        pass

    @abstractmethod
    async def fetch_funding_history(self, symbol: str, limit: int) -> List[FundingHistoryEvent]:
        """Return up to ``limit`` most recent funding settlements of one instrument."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} source={self.name}>"


__all__ = ["BaseFundingSource"]
