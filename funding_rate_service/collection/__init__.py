"""
Data collection layer for funding rates
"""

from funding_rate_service.collection.source_adapter import SourceAdapter, normalize_symbol
from funding_rate_service.collection.orchestrator import FundingFetchOrchestrator

__all__ = [
    "SourceAdapter",
    "FundingFetchOrchestrator",
    "normalize_symbol",
]
