"""
Funding Comparison Service

One aggregation run end to end: sources -> adapters -> orchestrator ->
comparison -> report. Each run builds its own sources and records; nothing
is shared between runs.
"""

from typing import Callable, List, Optional

from exchange_clients.base_source import BaseFundingSource
from exchange_clients.factory import FundingSourceFactory
from funding_rate_service.collection.orchestrator import FundingFetchOrchestrator
from funding_rate_service.collection.source_adapter import SourceAdapter
from funding_rate_service.config import Settings, settings as default_settings
from funding_rate_service.core.comparison_builder import ComparisonBuilder
from funding_rate_service.core.interval_classifier import IntervalClassifier
from funding_rate_service.core.report_assembler import ReportAssembler
from funding_rate_service.models.report import FundingReport
from funding_rate_service.utils.logger import logger


SourceBuilder = Callable[[], List[BaseFundingSource]]


class FundingComparisonService:
    """
    Runs the full pipeline on demand

    Usage:
        service = FundingComparisonService()
        report = await service.run()
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        source_builder: Optional[SourceBuilder] = None,
        classifier: Optional[IntervalClassifier] = None
    ):
        """
        Args:
            config: Settings (defaults to the global settings)
            source_builder: Creates fresh sources for every run
            classifier: Heuristic interval classifier override
        """
        self.config = config or default_settings
        self.source_builder = source_builder or self._default_sources
        self.classifier = classifier
        self.assembler = ReportAssembler()

    def _default_sources(self) -> List[BaseFundingSource]:
        return FundingSourceFactory.create_sources(
            self.config.enabled_sources,
            ticker_only_sources=self.config.ticker_only_sources,
            timeout=self.config.request_timeout_seconds,
        )

    async def run(self) -> FundingReport:
        """Fetch, reconcile and assemble one report."""
        logger.info("Starting funding rates fetch...")
        sources = self.source_builder()
        adapters = [
            SourceAdapter(source, config=self.config, classifier=self.classifier)
            for source in sources
        ]
        orchestrator = FundingFetchOrchestrator(
            adapters,
            timeout_seconds=self.config.source_timeout_seconds,
        )

        try:
            run = await orchestrator.fetch_all()
        finally:
            await orchestrator.close()

        builder = ComparisonBuilder(
            source_order=[source.name for source in sources],
            high_threshold=self.config.comparison_high_threshold,
            medium_threshold=self.config.comparison_medium_threshold,
            top_n=self.config.comparison_fallback_top_n,
        )
        comparison = builder.build(run.records_by_source)
        report = self.assembler.assemble(run, comparison)

        logger.info(
            f"Completed in {report.fetch_duration_ms}ms. "
            f"Total contracts: {report.total_contracts}, comparison rows: {len(report.comparison)}"
        )
        return report
