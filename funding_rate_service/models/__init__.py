"""
Data models for Funding Rate Service
"""

from funding_rate_service.models.funding_record import (
    Exchange,
    FundingRecord,
    IntervalMethod,
)
from funding_rate_service.models.comparison import (
    EQUAL,
    ComparisonEntry,
    ComparisonResult,
    DifferentialBand,
    SourceProjection,
)
from funding_rate_service.models.system import (
    FetchRunResult,
    SourceOutcome,
    SourceStatus,
)
from funding_rate_service.models.report import (
    FundingReport,
    FundingSummary,
    SourceReport,
)

__all__ = [
    # Record models
    "Exchange",
    "FundingRecord",
    "IntervalMethod",
    # Comparison models
    "EQUAL",
    "ComparisonEntry",
    "ComparisonResult",
    "DifferentialBand",
    "SourceProjection",
    # Run models
    "FetchRunResult",
    "SourceOutcome",
    "SourceStatus",
    # Report models
    "FundingReport",
    "FundingSummary",
    "SourceReport",
]
