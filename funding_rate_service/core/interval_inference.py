"""
Funding Interval Inference

Produces a definite settlement interval for one instrument by trying, in
order, methods of decreasing reliability:

1. the interval the source reports itself (snapshot metadata)
2. current / next settlement timestamps from the live snapshot
3. current / next settlement datetime strings from the live snapshot
4. the two most recent settlements from the source's funding history
   (capped per run, one extra request per instrument)
5. static heuristic classification of the symbol

The first result inside (0, 24] hours wins. The engine never raises.
"""

from dataclasses import dataclass
from typing import Optional

from exchange_clients.base_models import FundingSnapshot
from exchange_clients.base_source import BaseFundingSource
from funding_rate_service.core.interval_calculator import (
    calculate_funding_interval,
    is_valid_interval,
    parse_datetime_string,
    parse_interval_label,
)
from funding_rate_service.core.interval_classifier import (
    HeuristicIntervalClassifier,
    IntervalClassifier,
)
from funding_rate_service.models.funding_record import IntervalMethod
from funding_rate_service.utils.logger import logger


@dataclass(frozen=True)
class IntervalEstimate:
    hours: int
    method: IntervalMethod


class HistoryLookupBudget:
    """
    Caps how many instruments may use the history lookup in one run.

    Slots are taken synchronously before the request is awaited, so
    concurrent tasks on one event loop cannot overshoot the cap.
    """

    def __init__(self, cap: int):
        self.cap = max(cap, 0)
        self.used = 0

    @property
    def remaining(self) -> int:
        return self.cap - self.used

    def try_acquire(self) -> bool:
        if self.used >= self.cap:
            return False
        self.used += 1
        return True


class IntervalInferenceEngine:
    """
    Fallback chain for one source's instruments

    Usage:
        engine = IntervalInferenceEngine(HistoryLookupBudget(20))
        estimate = await engine.infer(source, "BTC/USDT:USDT", "BTC", snapshot)
    """

    def __init__(
        self,
        history_budget: HistoryLookupBudget,
        classifier: Optional[IntervalClassifier] = None,
        history_limit: int = 2
    ):
        self.history_budget = history_budget
        self.classifier = classifier or HeuristicIntervalClassifier()
        self.history_limit = history_limit

    async def infer(
        self,
        source: BaseFundingSource,
        source_symbol: str,
        symbol: str,
        snapshot: Optional[FundingSnapshot] = None
    ) -> IntervalEstimate:
        """
        Args:
            source: Source that lists the instrument (used for history lookups)
            source_symbol: Native instrument id
            symbol: Canonical symbol (used by the heuristic)
            snapshot: Live funding snapshot, if the source has one

        Returns:
            IntervalEstimate with a valid hour count and the method that produced it
        """
        if snapshot is not None:
            hours = self.from_reported_interval(snapshot)
            if is_valid_interval(hours):
                return IntervalEstimate(hours, IntervalMethod.REPORTED)

            hours = self.from_timestamps(snapshot)
            if is_valid_interval(hours):
                return IntervalEstimate(hours, IntervalMethod.TIMESTAMP_PAIR)

            hours = self.from_datetime_strings(snapshot)
            if is_valid_interval(hours):
                return IntervalEstimate(hours, IntervalMethod.DATETIME_PAIR)

        hours = await self.from_history(source, source_symbol)
        if is_valid_interval(hours):
            return IntervalEstimate(hours, IntervalMethod.HISTORY)

        return IntervalEstimate(self.classifier.classify(symbol), IntervalMethod.HEURISTIC)

    @staticmethod
    def from_reported_interval(snapshot: FundingSnapshot) -> Optional[int]:
        return parse_interval_label((snapshot.metadata or {}).get("interval"))

    @staticmethod
    def from_timestamps(snapshot: FundingSnapshot) -> Optional[int]:
        return calculate_funding_interval(
            snapshot.funding_timestamp,
            snapshot.next_funding_timestamp
        )

    @staticmethod
    def from_datetime_strings(snapshot: FundingSnapshot) -> Optional[int]:
        return calculate_funding_interval(
            parse_datetime_string(snapshot.funding_datetime),
            parse_datetime_string(snapshot.next_funding_datetime)
        )

    async def from_history(self, source: BaseFundingSource, source_symbol: str) -> Optional[int]:
        """Interval between the two most recent settlements, None on any failure."""
        if not source.supports_funding_history:
            return None
        if not self.history_budget.try_acquire():
            return None

        try:
            events = await source.fetch_funding_history(source_symbol, self.history_limit)
        except Exception as e:
            logger.debug(f"{source.name}: History lookup failed for {source_symbol}: {e}")
            return None

        if not events or len(events) < 2:
            return None

        latest = sorted(events, key=lambda event: event.timestamp)[-2:]
        return calculate_funding_interval(latest[0].timestamp, latest[1].timestamp)
