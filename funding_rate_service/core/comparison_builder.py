"""
Comparison Builder

Merges per-source funding records by symbol and compares rates between
sources.

Strategy:
1. Union every symbol across sources (merged view, nothing dropped)
2. For symbols on two or more sources with at least one rate, pair the first
   two sources (configured order) that carry the symbol
3. differential = rate(second) - rate(first), banded by |differential|
4. Sort ascending by differential (largest second-source edge first)
5. Without any pair, fall back to the top-N records of each source
"""

from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from funding_rate_service.models.comparison import (
    EQUAL,
    ComparisonEntry,
    ComparisonResult,
    DifferentialBand,
    SourceProjection,
)
from funding_rate_service.models.funding_record import FundingRecord
from funding_rate_service.utils.logger import logger


class ComparisonBuilder:
    """Symbol-keyed reconciliation of funding records across sources"""

    def __init__(
        self,
        source_order: Sequence[str],
        high_threshold: Decimal = Decimal("0.05"),
        medium_threshold: Decimal = Decimal("0.01"),
        top_n: int = 20
    ):
        """
        Args:
            source_order: Source names; earlier sources are "first" in a pair
            high_threshold: |differential| at or above this is HIGH (percent)
            medium_threshold: |differential| at or above this is MEDIUM (percent)
            top_n: Per-source entry count for the no-overlap fallback
        """
        self.source_order = [name.lower() for name in source_order]
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold
        self.top_n = top_n

    def build(self, records_by_source: Mapping[str, Sequence[FundingRecord]]) -> ComparisonResult:
        """
        Build the comparison for one aggregation run.

        Args:
            records_by_source: exchange -> records (one per symbol)

        Returns:
            ComparisonResult with merged view, sorted entries and fallback flag
        """
        order = self._effective_order(records_by_source)
        indexed: Dict[str, Dict[str, FundingRecord]] = {
            source: {record.symbol: record for record in records_by_source.get(source, [])}
            for source in order
        }

        symbols = sorted({symbol for records in indexed.values() for symbol in records})
        merged = {
            symbol: {
                source: self._project(indexed[source].get(symbol))
                for source in order
            }
            for symbol in symbols
        }

        entries: List[ComparisonEntry] = []
        for symbol in symbols:
            present = [source for source in order if symbol in indexed[source]]
            if len(present) < 2:
                continue

            pair = [indexed[source][symbol] for source in present[:2]]
            if not any(record.has_rate for record in pair):
                continue

            entries.append(self._paired_entry(symbol, merged[symbol], pair[0], pair[1]))

        entries.sort(key=self._sort_key)

        fallback_used = False
        if not entries:
            entries = self._fallback_entries(indexed, order)
            fallback_used = bool(entries)
            if fallback_used:
                logger.info(
                    f"No overlapping symbols across sources, showing top {self.top_n} per source"
                )

        logger.debug(
            f"Comparison built: {len(symbols)} symbols, {len(entries)} entries"
            f"{' (fallback)' if fallback_used else ''}"
        )
        return ComparisonResult(entries=entries, merged=merged, fallback_used=fallback_used)

    def _effective_order(self, records_by_source: Mapping[str, Sequence[FundingRecord]]) -> List[str]:
        """Configured order, then any unexpected sources alphabetically."""
        extra = sorted(source for source in records_by_source if source not in self.source_order)
        return self.source_order + extra

    @staticmethod
    def _project(record: Optional[FundingRecord]) -> Optional[SourceProjection]:
        return SourceProjection.from_record(record) if record is not None else None

    def classify(self, abs_differential: Optional[Decimal]) -> DifferentialBand:
        if abs_differential is None:
            return DifferentialBand.UNAVAILABLE
        if abs_differential >= self.high_threshold:
            return DifferentialBand.HIGH
        if abs_differential >= self.medium_threshold:
            return DifferentialBand.MEDIUM
        return DifferentialBand.LOW

    def _paired_entry(
        self,
        symbol: str,
        projections: Dict[str, Optional[SourceProjection]],
        first: FundingRecord,
        second: FundingRecord
    ) -> ComparisonEntry:
        differential = None
        abs_differential = None
        favorable = None

        if first.has_rate and second.has_rate:
            differential = second.funding_rate - first.funding_rate
            abs_differential = abs(differential)
            if differential > 0:
                favorable = second.exchange
            elif differential < 0:
                favorable = first.exchange
            else:
                favorable = EQUAL

        return ComparisonEntry(
            symbol=symbol,
            sources=projections,
            first_exchange=first.exchange,
            second_exchange=second.exchange,
            differential=differential,
            abs_differential=abs_differential,
            band=self.classify(abs_differential),
            favorable_exchange=favorable,
        )

    @staticmethod
    def _sort_key(entry: ComparisonEntry):
        # Entries without a differential go last
        if entry.differential is None:
            return (1, Decimal(0), entry.symbol)
        return (0, entry.differential, entry.symbol)

    def _fallback_entries(
        self,
        indexed: Dict[str, Dict[str, FundingRecord]],
        order: List[str]
    ) -> List[ComparisonEntry]:
        """Top-N per source by rate (unrated last), one single-source entry each."""
        entries: List[ComparisonEntry] = []
        for source in order:
            records = sorted(
                indexed[source].values(),
                key=lambda r: (
                    0 if r.has_rate else 1,
                    -(r.funding_rate or Decimal(0)),
                    r.symbol,
                )
            )
            for record in records[: self.top_n]:
                sources = {name: None for name in order}
                sources[source] = SourceProjection.from_record(record)
                entries.append(
                    ComparisonEntry(
                        symbol=record.symbol,
                        sources=sources,
                        first_exchange=source,
                        is_fallback=True,
                    )
                )
        return entries
