"""
Core business logic components
"""
from .interval_calculator import (
    calculate_funding_interval,
    is_valid_interval,
    normalize_timestamp_ms,
    parse_datetime_string,
    parse_interval_label,
)
from .interval_classifier import HeuristicIntervalClassifier, IntervalClassifier
from .interval_inference import HistoryLookupBudget, IntervalEstimate, IntervalInferenceEngine
from .comparison_builder import ComparisonBuilder
from .report_assembler import ReportAssembler

__all__ = [
    # Interval calculator
    "calculate_funding_interval",
    "is_valid_interval",
    "normalize_timestamp_ms",
    "parse_datetime_string",
    "parse_interval_label",

    # Interval inference
    "HeuristicIntervalClassifier",
    "IntervalClassifier",
    "HistoryLookupBudget",
    "IntervalEstimate",
    "IntervalInferenceEngine",

    # Comparison
    "ComparisonBuilder",
    "ReportAssembler",
]
