"""Pytest configuration and shared fakes for funding rate service tests."""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from exchange_clients.base_models import FundingHistoryEvent, FundingSnapshot, InstrumentInfo  # noqa: E402
from exchange_clients.base_source import BaseFundingSource  # noqa: E402
from funding_rate_service.config import Settings  # noqa: E402


def perp(symbol: str, quote: str = "USDT", is_perpetual: bool = True) -> InstrumentInfo:
    base = symbol.split("/")[0]
    return InstrumentInfo(symbol=symbol, base=base, quote=quote, is_perpetual=is_perpetual)


class FakeFundingSource(BaseFundingSource):
    """In-memory source with switchable capabilities and failures."""

    def __init__(
        self,
        name: str = "binance",
        instruments: Optional[Iterable[InstrumentInfo]] = None,
        snapshots: Optional[Dict[str, FundingSnapshot]] = None,
        tickers: Optional[Dict[str, Decimal]] = None,
        history: Optional[Dict[str, List[FundingHistoryEvent]]] = None,
        funding_api: bool = True,
        history_api: bool = True,
        list_error: Optional[Exception] = None,
        snapshot_error: Optional[Exception] = None,
        ticker_errors: Iterable[str] = (),
        history_error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        super().__init__(name)
        self.instruments = list(instruments or [])
        self.snapshots = snapshots or {}
        self.tickers = tickers or {}
        self.history = history or {}
        self.funding_api = funding_api
        self.history_api = history_api
        self.list_error = list_error
        self.snapshot_error = snapshot_error
        self.ticker_errors = set(ticker_errors)
        self.history_error = history_error
        self.delay = delay

        self.ticker_calls: List[str] = []
        self.history_calls: List[str] = []
        self.closed = False

    @property
    def supports_funding_snapshot(self) -> bool:
        return self.funding_api

    @property
    def supports_funding_history(self) -> bool:
        return self.history_api

    async def list_instruments(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.list_error:
            raise self.list_error
        return self.instruments

    async def fetch_funding_snapshot(self):
        if self.snapshot_error:
            raise self.snapshot_error
        return self.snapshots

    async def fetch_ticker(self, symbol):
        self.ticker_calls.append(symbol)
        if symbol in self.ticker_errors:
            raise RuntimeError(f"ticker unavailable for {symbol}")
        return self.tickers.get(symbol)

    async def fetch_funding_history(self, symbol, limit):
        self.history_calls.append(symbol)
        if self.history_error:
            raise self.history_error
        return self.history.get(symbol, [])[-limit:]

    async def close(self):
        self.closed = True


@pytest.fixture
def test_settings() -> Settings:
    """Settings with politeness delays disabled."""
    return Settings(
        _env_file=None,
        enabled_sources=["binance", "mexc"],
        ticker_only_sources=["mexc"],
        snapshot_batch_delay_seconds=0,
        ticker_batch_delay_seconds=0,
        source_timeout_seconds=5,
    )
