"""
Report Assembler

Builds the outbound FundingReport from a fetch run and its comparison.
"""

from collections import Counter
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from funding_rate_service.models.comparison import ComparisonResult
from funding_rate_service.models.funding_record import FundingRecord
from funding_rate_service.models.report import FundingReport, FundingSummary, SourceReport
from funding_rate_service.models.system import FetchRunResult


AVERAGE_PRECISION = Decimal("0.000001")


def interval_histogram(records: Sequence[FundingRecord]) -> Dict[str, int]:
    """'<hours>H' -> count, ordered by hours."""
    counts = Counter(record.funding_interval_hours for record in records)
    return {f"{hours}H": counts[hours] for hours in sorted(counts)}


def summarize(records: Sequence[FundingRecord]) -> FundingSummary:
    """
    Highest, lowest and average rate.

    Records without a rate are excluded rather than counted as zero; the
    average is None when no record carries a rate.
    """
    rated = [record for record in records if record.has_rate]
    if not rated:
        return FundingSummary()

    # Ties resolve to the first record in exchange/symbol order
    ordered = sorted(rated, key=lambda r: (r.exchange, r.symbol))
    highest = max(ordered, key=lambda r: r.funding_rate)
    lowest = min(ordered, key=lambda r: r.funding_rate)
    total = sum((record.funding_rate for record in rated), Decimal(0))
    average = (total / len(rated)).quantize(AVERAGE_PRECISION)

    return FundingSummary(
        highest_funding_rate=highest,
        lowest_funding_rate=lowest,
        average_funding_rate=average,
        rated_contracts=len(rated),
    )


class ReportAssembler:
    """Assembles the serializable report payload"""

    def assemble(
        self,
        run: FetchRunResult,
        comparison: ComparisonResult,
        timestamp: Optional[datetime] = None
    ) -> FundingReport:
        all_records: List[FundingRecord] = run.all_records

        return FundingReport(
            success=True,
            timestamp=timestamp or datetime.now(timezone.utc),
            fetch_duration_ms=run.duration_ms,
            total_contracts=len(all_records),
            exchanges={outcome.exchange: len(outcome.records) for outcome in run.outcomes},
            sources={
                outcome.exchange: SourceReport(
                    status=outcome.status,
                    count=len(outcome.records),
                    latency_ms=outcome.latency_ms,
                    error=outcome.error,
                )
                for outcome in run.outcomes
            },
            funding_intervals=interval_histogram(all_records),
            comparison=comparison.entries,
            comparison_fallback=comparison.fallback_used,
            summary=summarize(all_records),
            data=run.records_by_source,
        )
