import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from conftest import FakeFundingSource, perp
from exchange_clients.base_models import FundingSnapshot
from funding_rate_service.collection.source_adapter import SourceAdapter, normalize_symbol, to_percent
from funding_rate_service.models.funding_record import IntervalMethod

HOUR_MS = 3_600_000
T0 = 1_700_000_000_000


def _snapshot(symbol: str, rate: str, hours: int = 8, **kwargs) -> FundingSnapshot:
    return FundingSnapshot(
        symbol=symbol,
        funding_rate=Decimal(rate),
        funding_timestamp=T0,
        next_funding_timestamp=T0 + hours * HOUR_MS,
        **kwargs,
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "source_symbol,expected",
    [
        ("BTC/USDT:USDT", "BTC"),
        ("1000PEPE/USDT:USDT", "1000PEPE"),
        ("ETH/USDT", "ETH"),
        ("ETH_USDT", "ETH"),
        ("SOL-USDT", "SOL"),
        ("SOLUSDT", "SOL"),
        ("USDT", "USDT"),
    ],
)
def test_normalize_symbol(source_symbol, expected):
    assert normalize_symbol(source_symbol, "USDT") == expected


@pytest.mark.unit
def test_to_percent_quantizes_to_six_places():
    assert to_percent(Decimal("0.0001")) == Decimal("0.010000")
    assert to_percent(Decimal("-0.00012345678")) == Decimal("-0.012346")
    assert to_percent(Decimal("0")) == Decimal("0")
    assert to_percent(None) is None


@pytest.mark.asyncio
async def test_snapshot_mode_filters_and_normalizes(test_settings):
    source = FakeFundingSource(
        name="binance",
        instruments=[
            perp("ETH/USDT:USDT"),
            perp("BTC/USDT:USDT"),
            perp("BTC/USDC:USDC", quote="USDC"),
            perp("BTC/USDT", is_perpetual=False),
        ],
        snapshots={
            "BTC/USDT:USDT": _snapshot("BTC/USDT:USDT", "0.0001", mark_price=Decimal("37000.5")),
            "ETH/USDT:USDT": _snapshot("ETH/USDT:USDT", "-0.00005", hours=4),
            "BTC/USDC:USDC": _snapshot("BTC/USDC:USDC", "0.0003"),
        },
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert [r.symbol for r in records] == ["BTC", "ETH"]
    btc, eth = records
    assert btc.exchange == "binance"
    assert btc.source_symbol == "BTC/USDT:USDT"
    assert btc.funding_rate == Decimal("0.010000")
    assert btc.funding_interval_hours == 8
    assert btc.interval_source == IntervalMethod.TIMESTAMP_PAIR
    assert btc.mark_price == Decimal("37000.5")
    assert eth.funding_rate == Decimal("-0.005000")
    assert eth.funding_interval_hours == 4


@pytest.mark.asyncio
async def test_zero_rate_is_kept_as_real_value(test_settings):
    source = FakeFundingSource(
        instruments=[perp("BTC/USDT:USDT")],
        snapshots={"BTC/USDT:USDT": _snapshot("BTC/USDT:USDT", "0")},
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert records[0].funding_rate == Decimal("0")
    assert records[0].has_rate


@pytest.mark.asyncio
async def test_instruments_missing_from_snapshot_are_skipped(test_settings):
    source = FakeFundingSource(
        instruments=[perp("BTC/USDT:USDT"), perp("ETH/USDT:USDT")],
        snapshots={"BTC/USDT:USDT": _snapshot("BTC/USDT:USDT", "0.0001")},
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert [r.symbol for r in records] == ["BTC"]


@pytest.mark.asyncio
async def test_listing_failure_yields_empty_result(test_settings):
    source = FakeFundingSource(list_error=RuntimeError("exchange down"))
    assert await SourceAdapter(source, config=test_settings).fetch_records() == []


@pytest.mark.asyncio
async def test_snapshot_failure_yields_empty_result(test_settings):
    source = FakeFundingSource(
        instruments=[perp("BTC/USDT:USDT")],
        snapshot_error=RuntimeError("rate limited"),
    )
    assert await SourceAdapter(source, config=test_settings).fetch_records() == []


@pytest.mark.asyncio
async def test_ticker_only_mode_emits_records_without_rate(test_settings):
    source = FakeFundingSource(
        name="mexc",
        funding_api=False,
        history_api=False,
        instruments=[perp("BTC/USDT:USDT"), perp("ZKJ/USDT:USDT")],
        tickers={"BTC/USDT:USDT": Decimal("37010"), "ZKJ/USDT:USDT": Decimal("0.41")},
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert [r.symbol for r in records] == ["BTC", "ZKJ"]
    assert all(r.funding_rate is None for r in records)
    assert all(r.interval_source == IntervalMethod.HEURISTIC for r in records)
    assert records[0].mark_price == Decimal("37010")
    assert records[0].funding_interval_hours == 8
    assert records[1].funding_interval_hours == 4


@pytest.mark.asyncio
async def test_ticker_failure_drops_only_that_instrument(test_settings):
    source = FakeFundingSource(
        name="mexc",
        funding_api=False,
        history_api=False,
        instruments=[perp("BTC/USDT:USDT"), perp("ETH/USDT:USDT"), perp("SOL/USDT:USDT")],
        tickers={"BTC/USDT:USDT": Decimal("1"), "SOL/USDT:USDT": Decimal("3")},
        ticker_errors={"ETH/USDT:USDT"},
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert [r.symbol for r in records] == ["BTC", "SOL"]
    assert sorted(source.ticker_calls) == ["BTC/USDT:USDT", "ETH/USDT:USDT", "SOL/USDT:USDT"]


@pytest.mark.asyncio
async def test_ticker_only_mode_caps_instrument_count(test_settings):
    config = test_settings.model_copy(update={"ticker_only_max_instruments": 3})
    instruments = [perp(f"C{i:02d}/USDT:USDT") for i in range(10)]
    source = FakeFundingSource(funding_api=False, history_api=False, instruments=instruments)

    records = await SourceAdapter(source, config=config).fetch_records()

    assert len(records) == 3
    assert len(source.ticker_calls) == 3


@pytest.mark.asyncio
async def test_delay_between_batches_but_not_after_last(test_settings):
    config = test_settings.model_copy(
        update={"snapshot_batch_size": 10, "snapshot_batch_delay_seconds": 0.1}
    )
    symbols = [f"C{i:02d}/USDT:USDT" for i in range(25)]
    source = FakeFundingSource(
        instruments=[perp(s) for s in symbols],
        snapshots={s: _snapshot(s, "0.0001") for s in symbols},
    )
    sleep = AsyncMock()

    records = await SourceAdapter(source, config=config, sleep=sleep).fetch_records()

    assert len(records) == 25
    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.1)


@pytest.mark.asyncio
async def test_duplicate_symbols_keep_first_source_symbol(test_settings):
    source = FakeFundingSource(
        instruments=[perp("BTC_USDT"), perp("BTC/USDT:USDT")],
        snapshots={
            "BTC_USDT": _snapshot("BTC_USDT", "0.0002"),
            "BTC/USDT:USDT": _snapshot("BTC/USDT:USDT", "0.0001"),
        },
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert len(records) == 1
    assert records[0].source_symbol == "BTC/USDT:USDT"


@pytest.mark.asyncio
async def test_history_budget_is_fresh_per_run(test_settings):
    config = test_settings.model_copy(update={"history_lookup_cap": 1})
    source = FakeFundingSource(
        funding_api=False,
        instruments=[perp("BTC/USDT:USDT"), perp("ETH/USDT:USDT")],
    )
    adapter = SourceAdapter(source, config=config)

    await adapter.fetch_records()
    await adapter.fetch_records()

    assert len(source.history_calls) == 2


class _CancellingTickerSource(FakeFundingSource):
    """Ticker call for one instrument is cancelled mid-flight."""

    def __init__(self, cancelled_symbol: str, **kwargs):
        super().__init__(**kwargs)
        self.cancelled_symbol = cancelled_symbol

    async def fetch_ticker(self, symbol):
        if symbol == self.cancelled_symbol:
            self.ticker_calls.append(symbol)
            raise asyncio.CancelledError()
        return await super().fetch_ticker(symbol)


@pytest.mark.asyncio
async def test_cancelled_instrument_does_not_drop_the_source(test_settings):
    source = _CancellingTickerSource(
        "BAD/USDT:USDT",
        name="mexc",
        funding_api=False,
        history_api=False,
        instruments=[perp("BAD/USDT:USDT"), perp("BTC/USDT:USDT"), perp("ETH/USDT:USDT")],
        tickers={"BTC/USDT:USDT": Decimal("1"), "ETH/USDT:USDT": Decimal("2")},
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert [r.symbol for r in records] == ["BTC", "ETH"]
    assert "BAD/USDT:USDT" in source.ticker_calls


@pytest.mark.asyncio
async def test_malformed_listing_yields_empty_result(test_settings):
    source = FakeFundingSource()
    source.list_instruments = AsyncMock(return_value=None)

    assert await SourceAdapter(source, config=test_settings).fetch_records() == []


@pytest.mark.asyncio
async def test_snapshot_with_reported_interval(test_settings):
    source = FakeFundingSource(
        history_api=False,
        instruments=[perp("QWERTY/USDT:USDT")],
        snapshots={
            "QWERTY/USDT:USDT": FundingSnapshot(
                symbol="QWERTY/USDT:USDT",
                funding_rate=Decimal("0.0001"),
                funding_timestamp=T0,
                metadata={"interval": "4h"},
            )
        },
    )

    records = await SourceAdapter(source, config=test_settings).fetch_records()

    assert records[0].funding_interval_hours == 4
    assert records[0].interval_source == IntervalMethod.REPORTED
