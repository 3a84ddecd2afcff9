"""
ccxt-backed funding source

Talks to centralized exchanges (Binance, MEXC, ...) through the unified
``ccxt.async_support`` API. Public endpoints only; no credentials.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import ccxt.async_support as ccxt_async
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from helpers.unified_logger import get_exchange_logger

from .base_models import (
    FundingHistoryEvent,
    FundingSnapshot,
    InstrumentInfo,
    to_decimal,
    to_int,
)
from .base_source import BaseFundingSource


network_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=5),
    retry=retry_if_exception_type(ccxt_async.NetworkError),
    reraise=True,
)


class CcxtFundingSource(BaseFundingSource):
    """
    Funding source for any ccxt exchange id.

    Capabilities come from ``exchange.has``. ``ticker_only`` forces the
    funding snapshot capability off for exchanges whose bulk funding
    endpoint is missing or unreliable.
    """

    def __init__(
        self,
        name: str,
        exchange: Optional[Any] = None,
        ticker_only: bool = False,
        timeout: int = 10
    ):
        """
        Args:
            name: ccxt exchange id (e.g., "binance", "mexc")
            exchange: Pre-built ccxt exchange (tests inject fakes here)
            ticker_only: Treat the exchange as having no funding-rate endpoint
            timeout: Per-request timeout in seconds
        """
        super().__init__(name)
        if exchange is None:
            exchange_class = getattr(ccxt_async, self.name)
            exchange = exchange_class({
                "enableRateLimit": True,
                "timeout": timeout * 1000,
                "options": {"defaultType": "swap"},
            })
        self.exchange = exchange
        self.ticker_only = ticker_only
        self.logger = get_exchange_logger(self.name)
        self._markets_loaded = False

    def _has(self, capability: str) -> bool:
        has = getattr(self.exchange, "has", None) or {}
        return bool(has.get(capability))

    @property
    def supports_funding_snapshot(self) -> bool:
        return not self.ticker_only and self._has("fetchFundingRates")

    @property
    def supports_funding_history(self) -> bool:
        return self._has("fetchFundingRateHistory")

    @network_retry
    async def _load_markets(self) -> Dict[str, Dict[str, Any]]:
        markets = await self.exchange.load_markets()
        self._markets_loaded = True
        return markets or {}

    async def list_instruments(self) -> Sequence[InstrumentInfo]:
        markets = await self._load_markets()
        instruments = []
        for symbol, market in markets.items():
            instruments.append(
                InstrumentInfo(
                    symbol=symbol,
                    base=market.get("base"),
                    quote=market.get("quote"),
                    is_perpetual=bool(market.get("swap")),
                )
            )
        self.logger.debug(f"{self.name}: Listed {len(instruments)} instruments")
        return instruments

    @network_retry
    async def fetch_funding_snapshot(self) -> Dict[str, FundingSnapshot]:
        # Not _load_markets: this method already carries the retry
        if not self._markets_loaded:
            await self.exchange.load_markets()
            self._markets_loaded = True

        raw_rates = await self.exchange.fetch_funding_rates()
        snapshots: Dict[str, FundingSnapshot] = {}
        for symbol, data in (raw_rates or {}).items():
            snapshots[symbol] = self._parse_funding_rate(symbol, data)
        return snapshots

    @staticmethod
    def _parse_funding_rate(symbol: str, data: Dict[str, Any]) -> FundingSnapshot:
        """Map a ccxt funding-rate structure to a snapshot."""
        # Some ccxt builds expose nextFundingTime instead of nextFundingTimestamp
        next_ts = data.get("nextFundingTimestamp")
        if next_ts is None:
            next_ts = data.get("nextFundingTime")

        return FundingSnapshot(
            symbol=symbol,
            funding_rate=to_decimal(data.get("fundingRate")),
            funding_timestamp=to_int(data.get("fundingTimestamp")),
            next_funding_timestamp=to_int(next_ts),
            funding_datetime=data.get("fundingDatetime"),
            next_funding_datetime=data.get("nextFundingDatetime"),
            mark_price=to_decimal(data.get("markPrice")),
            index_price=to_decimal(data.get("indexPrice")),
            metadata={"interval": data.get("interval")} if data.get("interval") else {},
        )

    @network_retry
    async def fetch_ticker(self, symbol: str) -> Optional[Decimal]:
        ticker = await self.exchange.fetch_ticker(symbol)
        return to_decimal((ticker or {}).get("last"))

    @network_retry
    async def fetch_funding_history(self, symbol: str, limit: int) -> List[FundingHistoryEvent]:
        history = await self.exchange.fetch_funding_rate_history(symbol, None, limit)
        events = []
        for entry in history or []:
            timestamp = to_int(entry.get("timestamp"))
            if timestamp is None:
                continue
            events.append(
                FundingHistoryEvent(
                    symbol=symbol,
                    timestamp=timestamp,
                    funding_rate=to_decimal(entry.get("fundingRate")),
                )
            )
        return events

    async def close(self) -> None:
        await self.exchange.close()
        self.logger.debug(f"{self.name}: Session closed")


__all__ = ["CcxtFundingSource"]
