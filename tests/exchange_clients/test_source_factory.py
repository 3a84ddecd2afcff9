"""
Tests for the funding source factory.
"""

import pytest

from exchange_clients.base_models import UnsupportedSourceError
from exchange_clients.ccxt_source import CcxtFundingSource
from exchange_clients.factory import FundingSourceFactory


class TestFundingSourceFactory:
    """Factory lookups and construction"""

    @pytest.mark.asyncio
    async def test_creates_ccxt_sources_in_order(self):
        sources = FundingSourceFactory.create_sources(
            ["Binance", "mexc"],
            ticker_only_sources=["MEXC"],
            timeout=7,
        )

        try:
            assert [s.name for s in sources] == ["binance", "mexc"]
            assert all(isinstance(s, CcxtFundingSource) for s in sources)
            assert not sources[0].ticker_only
            assert sources[1].ticker_only
            assert not sources[1].supports_funding_snapshot
            assert sources[0].exchange.timeout == 7000
        finally:
            for source in sources:
                await source.close()

    def test_unsupported_source_raises(self):
        with pytest.raises(UnsupportedSourceError, match="Available sources: binance, mexc"):
            FundingSourceFactory.create_source("kraken")

    def test_supported_sources(self):
        assert FundingSourceFactory.get_supported_sources() == ["binance", "mexc"]

    def test_register_source(self, monkeypatch):
        registry = dict(FundingSourceFactory._registered_sources)
        monkeypatch.setattr(FundingSourceFactory, "_registered_sources", registry)

        FundingSourceFactory.register_source("OKX", "exchange_clients.ccxt_source.CcxtFundingSource")

        assert "okx" in FundingSourceFactory.get_supported_sources()

    def test_bad_class_path_raises_import_error(self, monkeypatch):
        monkeypatch.setitem(FundingSourceFactory._registered_sources, "broken", "exchange_clients.nowhere.Source")

        with pytest.raises(ImportError):
            FundingSourceFactory.create_source("broken")

    def test_class_must_be_a_funding_source(self, monkeypatch):
        monkeypatch.setitem(
            FundingSourceFactory._registered_sources,
            "wrong",
            "exchange_clients.base_models.InstrumentInfo",
        )

        with pytest.raises(ValueError, match="must inherit from BaseFundingSource"):
            FundingSourceFactory.create_source("wrong")
