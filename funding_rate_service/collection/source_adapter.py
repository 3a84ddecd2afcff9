"""
Source Adapter

Turns one funding source's raw capabilities into a sorted list of
normalized FundingRecords.

Two modes:
- snapshot: the source has a funding-rate endpoint; one bulk snapshot call,
  then per-instrument interval inference
- ticker-only: no funding-rate endpoint; per-instrument ticker calls produce
  records with an unavailable rate so the instrument still shows up

Instrument-level failures drop that instrument only. Source-level failures
(listing, snapshot) produce an empty list. Nothing escapes to the caller
except cancellation.
"""

import asyncio
from decimal import Decimal
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from exchange_clients.base_models import FundingSnapshot, InstrumentInfo
from exchange_clients.base_source import BaseFundingSource
from funding_rate_service.config import Settings, settings as default_settings
from funding_rate_service.core.interval_classifier import IntervalClassifier
from funding_rate_service.core.interval_inference import (
    HistoryLookupBudget,
    IntervalInferenceEngine,
)
from funding_rate_service.models.funding_record import FundingRecord
from funding_rate_service.utils.logger import logger


RATE_PRECISION = Decimal("0.000001")
PERCENT = Decimal("100")


def normalize_symbol(source_symbol: str, quote: str) -> str:
    """
    Strip quote currency and contract suffix from a native symbol.

    Examples:
        - "BTC/USDT:USDT" -> "BTC"
        - "1000PEPE/USDT:USDT" -> "1000PEPE"
        - "ETH_USDT" -> "ETH"
        - "SOLUSDT" -> "SOL"
    """
    quote = quote.upper()
    base = source_symbol.split(":")[0].upper()

    for separator in ("/", "-", "_"):
        suffix = f"{separator}{quote}"
        if base.endswith(suffix):
            return base[: -len(suffix)]

    if base.endswith(quote) and len(base) > len(quote):
        return base[: -len(quote)]
    return base


def to_percent(rate: Optional[Decimal]) -> Optional[Decimal]:
    """Raw fraction -> percent, 6 decimal places."""
    if rate is None:
        return None
    return (rate * PERCENT).quantize(RATE_PRECISION)


class SourceAdapter:
    """
    Normalizing adapter around one BaseFundingSource

    Usage:
        adapter = SourceAdapter(source)
        records = await adapter.fetch_records()
    """

    def __init__(
        self,
        source: BaseFundingSource,
        config: Optional[Settings] = None,
        classifier: Optional[IntervalClassifier] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Args:
            source: Capability provider for one exchange
            config: Settings (defaults to the global settings)
            classifier: Heuristic interval classifier override
            sleep: Inter-batch delay coroutine (injectable for tests)
        """
        self.source = source
        self.config = config or default_settings
        self.classifier = classifier
        self._sleep = sleep

    @property
    def exchange(self) -> str:
        return self.source.name

    async def fetch_records(self) -> List[FundingRecord]:
        """Fetch and normalize all perpetual instruments of this source."""
        try:
            instruments = await self.source.list_instruments()
            universe = self._filter_instruments(instruments)
            snapshot_mode = self.source.supports_funding_snapshot
        except Exception as e:
            logger.error(f"{self.exchange}: Failed to list instruments: {e}")
            return []

        logger.info(f"{self.exchange}: Processing {len(universe)} perpetual contracts...")

        engine = IntervalInferenceEngine(
            HistoryLookupBudget(self.config.history_lookup_cap),
            classifier=self.classifier,
            history_limit=self.config.history_lookup_limit,
        )

        if snapshot_mode:
            records = await self._fetch_from_snapshot(universe, engine)
        else:
            records = await self._fetch_from_tickers(universe, engine)

        records = self._finalize(records)
        logger.info(f"{self.exchange}: Found {len(records)} perpetual contracts")
        return records

    def _filter_instruments(self, instruments: Sequence[InstrumentInfo]) -> List[InstrumentInfo]:
        """Perpetuals quoted in the reference currency, sorted by native symbol."""
        quote = self.config.quote_currency
        selected = [
            instrument for instrument in instruments
            if instrument.is_perpetual and (instrument.quote or "").upper() == quote
        ]
        return sorted(selected, key=lambda instrument: instrument.symbol)

    async def _fetch_from_snapshot(
        self,
        universe: List[InstrumentInfo],
        engine: IntervalInferenceEngine
    ) -> List[FundingRecord]:
        try:
            snapshots = await self.source.fetch_funding_snapshot()
        except Exception as e:
            logger.error(f"{self.exchange}: Failed to fetch funding snapshot: {e}")
            return []

        covered = [instrument for instrument in universe if instrument.symbol in snapshots]
        missing = len(universe) - len(covered)
        if missing:
            logger.debug(f"{self.exchange}: {missing} instruments missing from funding snapshot")

        async def build(instrument: InstrumentInfo) -> FundingRecord:
            return await self._build_snapshot_record(
                instrument, snapshots[instrument.symbol], engine
            )

        return await self._run_batches(
            covered,
            build,
            self.config.snapshot_batch_size,
            self.config.snapshot_batch_delay_seconds,
        )

    async def _fetch_from_tickers(
        self,
        universe: List[InstrumentInfo],
        engine: IntervalInferenceEngine
    ) -> List[FundingRecord]:
        limited = universe[: self.config.ticker_only_max_instruments]
        logger.debug(
            f"{self.exchange}: No funding-rate endpoint, using tickers for "
            f"{len(limited)}/{len(universe)} contracts"
        )

        async def build(instrument: InstrumentInfo) -> FundingRecord:
            return await self._build_ticker_record(instrument, engine)

        return await self._run_batches(
            limited,
            build,
            self.config.ticker_batch_size,
            self.config.ticker_batch_delay_seconds,
        )

    async def _run_batches(
        self,
        instruments: List[InstrumentInfo],
        build: Callable[[InstrumentInfo], Awaitable[FundingRecord]],
        batch_size: int,
        delay_seconds: float
    ) -> List[FundingRecord]:
        """Fan out one task per instrument, batch by batch."""
        records: List[FundingRecord] = []

        for start in range(0, len(instruments), batch_size):
            batch = instruments[start:start + batch_size]
            results = await asyncio.gather(
                *(build(instrument) for instrument in batch),
                return_exceptions=True
            )

            for instrument, result in zip(batch, results):
                # A cancelled child comes back as CancelledError, a BaseException
                if isinstance(result, BaseException):
                    logger.debug(f"{self.exchange}: Skipping {instrument.symbol}: {result}")
                    continue
                records.append(result)

            if start + batch_size < len(instruments) and delay_seconds > 0:
                await self._sleep(delay_seconds)

        return records

    async def _build_snapshot_record(
        self,
        instrument: InstrumentInfo,
        snapshot: FundingSnapshot,
        engine: IntervalInferenceEngine
    ) -> FundingRecord:
        symbol = normalize_symbol(instrument.symbol, self.config.quote_currency)
        estimate = await engine.infer(self.source, instrument.symbol, symbol, snapshot)

        return FundingRecord(
            exchange=self.exchange,
            symbol=symbol,
            source_symbol=instrument.symbol,
            funding_rate=to_percent(snapshot.funding_rate),
            funding_timestamp=snapshot.funding_timestamp,
            next_funding_timestamp=snapshot.next_funding_timestamp,
            funding_datetime=snapshot.funding_datetime,
            next_funding_datetime=snapshot.next_funding_datetime,
            funding_interval_hours=estimate.hours,
            interval_source=estimate.method,
            mark_price=snapshot.mark_price,
            index_price=snapshot.index_price,
        )

    async def _build_ticker_record(
        self,
        instrument: InstrumentInfo,
        engine: IntervalInferenceEngine
    ) -> FundingRecord:
        last_price = await self.source.fetch_ticker(instrument.symbol)
        symbol = normalize_symbol(instrument.symbol, self.config.quote_currency)
        estimate = await engine.infer(self.source, instrument.symbol, symbol)

        return FundingRecord(
            exchange=self.exchange,
            symbol=symbol,
            source_symbol=instrument.symbol,
            funding_rate=None,
            funding_interval_hours=estimate.hours,
            interval_source=estimate.method,
            mark_price=last_price,
        )

    def _finalize(self, records: List[FundingRecord]) -> List[FundingRecord]:
        """One record per symbol (first native symbol wins), sorted by symbol."""
        by_symbol: Dict[str, FundingRecord] = {}
        for record in sorted(records, key=lambda r: (r.symbol, r.source_symbol)):
            if record.symbol in by_symbol:
                logger.debug(
                    f"{self.exchange}: Duplicate symbol {record.symbol} "
                    f"({record.source_symbol}), keeping {by_symbol[record.symbol].source_symbol}"
                )
                continue
            by_symbol[record.symbol] = record
        return [by_symbol[symbol] for symbol in sorted(by_symbol)]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} source={self.exchange}>"
