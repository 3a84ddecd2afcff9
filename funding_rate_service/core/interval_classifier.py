"""
Heuristic funding interval classification

Last-resort interval estimate used when no timestamps or history are
available for an instrument. The lookup tables are plain immutable sets so
they can be extended or replaced without touching the classification order.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Tuple


# Listings that settle hourly on most venues
HIGH_FREQUENCY_SYMBOLS: FrozenSet[str] = frozenset({
    "AI16Z",
    "AIXBT",
    "FARTCOIN",
    "GOAT",
    "GRIFFAIN",
    "MELANIA",
    "MOODENG",
    "PNUT",
    "SWARMS",
    "TRUMP",
    "VINE",
    "VIRTUAL",
    "ZEREBRO",
})

# Name fragments of meme / high-volatility assets
MEME_PATTERNS: Tuple[str, ...] = (
    "PEPE",
    "SHIB",
    "FLOKI",
    "BONK",
    "WIF",
    "MEME",
    "DOGS",
    "INU",
    "CAT",
    "FROG",
    "MOG",
    "BABY",
    "ELON",
)

# Established assets on the standard 8h schedule
MAJOR_SYMBOLS: FrozenSet[str] = frozenset({
    "BTC",
    "ETH",
    "BNB",
    "SOL",
    "XRP",
    "ADA",
    "DOGE",
    "TRX",
    "LTC",
    "BCH",
    "ETC",
    "DOT",
    "LINK",
    "AVAX",
    "ATOM",
    "XLM",
    "UNI",
    "FIL",
    "NEAR",
    "APT",
    "ARB",
    "OP",
    "AAVE",
    "MKR",
})

# Large-denomination contract prefixes (1000PEPE, 1000000MOG, 1MBABYDOGE)
LARGE_DENOMINATION_PREFIXES: Tuple[str, ...] = ("1000000", "10000", "1000", "1M")

HIGH_FREQUENCY_HOURS = 1
MAJOR_HOURS = 8
LONG_NAME_HOURS = 2
DEFAULT_HOURS = 4
LONG_NAME_THRESHOLD = 5


class IntervalClassifier(ABC):
    """Maps a canonical symbol to an interval in hours. Must never fail."""

    @abstractmethod
    def classify(self, symbol: str) -> int:
        pass


class HeuristicIntervalClassifier(IntervalClassifier):
    """
    Static-knowledge classifier

    Order of rules:
    1. high-frequency list or meme pattern -> 1h
    2. major list or large-denomination prefix -> 8h
    3. name longer than 5 characters -> 2h, otherwise 4h
    """

    def __init__(
        self,
        high_frequency: Iterable[str] = HIGH_FREQUENCY_SYMBOLS,
        meme_patterns: Iterable[str] = MEME_PATTERNS,
        majors: Iterable[str] = MAJOR_SYMBOLS,
        large_denomination_prefixes: Iterable[str] = LARGE_DENOMINATION_PREFIXES,
    ):
        self.high_frequency = frozenset(s.upper() for s in high_frequency)
        self.meme_patterns = tuple(p.upper() for p in meme_patterns)
        self.majors = frozenset(s.upper() for s in majors)
        self.large_denomination_prefixes = tuple(p.upper() for p in large_denomination_prefixes)

    def is_high_frequency(self, symbol: str) -> bool:
        return symbol in self.high_frequency or any(
            pattern in symbol for pattern in self.meme_patterns
        )

    def is_major(self, symbol: str) -> bool:
        return symbol in self.majors or symbol.startswith(self.large_denomination_prefixes)

    def classify(self, symbol: str) -> int:
        normalized = (symbol or "").strip().upper()

        if self.is_high_frequency(normalized):
            return HIGH_FREQUENCY_HOURS
        if self.is_major(normalized):
            return MAJOR_HOURS
        if len(normalized) > LONG_NAME_THRESHOLD:
            return LONG_NAME_HOURS
        return DEFAULT_HOURS
