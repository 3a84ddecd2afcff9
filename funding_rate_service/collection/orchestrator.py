"""
Fetch Orchestrator

Runs every source adapter concurrently, each under its own timeout, and
collects what each one produced. A source that times out or fails
contributes an empty record list; the run as a whole never fails because of
one source.
"""

import asyncio
from typing import List, Optional

from funding_rate_service.collection.source_adapter import SourceAdapter
from funding_rate_service.models.system import FetchRunResult, SourceOutcome, SourceStatus
from funding_rate_service.utils.logger import logger


class FundingFetchOrchestrator:
    """
    Orchestrates funding record collection from multiple sources

    Responsibilities:
    1. Run all adapters in parallel
    2. Bound each adapter by the same independent timeout
    3. Substitute an empty result for timed-out or failed sources
    4. Report per-source status and latency

    Usage:
        orchestrator = FundingFetchOrchestrator([binance_adapter, mexc_adapter])
        run = await orchestrator.fetch_all()
    """

    def __init__(
        self,
        adapters: Optional[List[SourceAdapter]] = None,
        timeout_seconds: float = 25.0
    ):
        """
        Args:
            adapters: Source adapters, in comparison order
            timeout_seconds: Per-source time limit
        """
        self.adapters = adapters or []
        self.timeout_seconds = timeout_seconds

        logger.debug(f"FundingFetchOrchestrator initialized with {len(self.adapters)} adapters")

    def add_adapter(self, adapter: SourceAdapter) -> None:
        """Add a source adapter"""
        self.adapters.append(adapter)
        logger.info(f"Added adapter: {adapter.exchange}")

    async def fetch_all(self) -> FetchRunResult:
        """
        Fetch records from all adapters.

        Returns:
            FetchRunResult with one SourceOutcome per adapter, in adapter order
        """
        if not self.adapters:
            logger.warning("No adapters configured")
            return FetchRunResult()

        logger.info(f"Starting fetch from {len(self.adapters)} sources...")
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        outcomes = await asyncio.gather(
            *(self._fetch_from_adapter(adapter) for adapter in self.adapters)
        )

        duration_ms = int((loop.time() - start_time) * 1000)
        successful = sum(1 for outcome in outcomes if outcome.succeeded)
        total_records = sum(len(outcome.records) for outcome in outcomes)

        logger.info(
            f"Fetch complete: {successful}/{len(outcomes)} sources successful, "
            f"{total_records} total records in {duration_ms}ms"
        )
        if successful < len(outcomes):
            logger.warning(f"{len(outcomes) - successful} source(s) contributed no data")

        return FetchRunResult(outcomes=list(outcomes), duration_ms=duration_ms)

    async def _fetch_from_adapter(self, adapter: SourceAdapter) -> SourceOutcome:
        """Run one adapter under the timeout. Never raises (except on outer cancellation)."""
        exchange = adapter.exchange
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        def elapsed_ms() -> int:
            return int((loop.time() - start_time) * 1000)

        try:
            records = await asyncio.wait_for(adapter.fetch_records(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"{exchange}: Timed out after {self.timeout_seconds}s, using empty result")
            return SourceOutcome(
                exchange=exchange,
                status=SourceStatus.TIMED_OUT,
                latency_ms=elapsed_ms(),
                error=f"timed out after {self.timeout_seconds}s",
            )
        except Exception as e:
            logger.error(f"{exchange}: Fetch failed: {e}")
            return SourceOutcome(
                exchange=exchange,
                status=SourceStatus.ERRORED,
                latency_ms=elapsed_ms(),
                error=str(e),
            )

        latency_ms = elapsed_ms()
        logger.info(f"{exchange}: Collected {len(records)} records in {latency_ms}ms")
        return SourceOutcome(
            exchange=exchange,
            status=SourceStatus.COMPLETED,
            records=records,
            latency_ms=latency_ms,
        )

    async def close(self) -> None:
        """Close all source connections"""
        for adapter in self.adapters:
            try:
                await adapter.source.close()
            except Exception as e:
                logger.error(f"Error closing source {adapter.exchange}: {e}")
