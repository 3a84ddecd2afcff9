import pytest

from funding_rate_service.core.interval_classifier import (
    HIGH_FREQUENCY_SYMBOLS,
    MAJOR_SYMBOLS,
    HeuristicIntervalClassifier,
)


@pytest.fixture
def classifier():
    return HeuristicIntervalClassifier()


@pytest.mark.unit
@pytest.mark.parametrize("symbol", ["BTC", "ETH", "SOL", "DOGE", "1000SATS", "1000000XYZ"])
def test_majors_and_large_denomination_are_eight_hours(classifier, symbol):
    assert classifier.classify(symbol) == 8


@pytest.mark.unit
@pytest.mark.parametrize("symbol", ["TRUMP", "FARTCOIN", "PEPE", "BONK", "1000PEPE", "POPCAT"])
def test_high_frequency_and_meme_names_are_one_hour(classifier, symbol):
    # Meme patterns win over the large-denomination prefix
    assert classifier.classify(symbol) == 1


@pytest.mark.unit
def test_name_length_tiebreak(classifier):
    assert classifier.classify("QWERTY") == 2
    assert classifier.classify("ZKJ") == 4
    assert classifier.classify("ZKJQW") == 4


@pytest.mark.unit
def test_classification_is_deterministic_and_bounded(classifier):
    symbols = ["BTC", "ZKJ", "QWERTY", "TRUMP", "1000SATS", "", "x"]
    first = [classifier.classify(symbol) for symbol in symbols]
    second = [classifier.classify(symbol) for symbol in symbols]

    assert first == second
    assert set(first) <= {1, 2, 4, 8}


@pytest.mark.unit
def test_case_insensitive(classifier):
    assert classifier.classify("btc") == classifier.classify("BTC") == 8
    assert classifier.classify("trump") == 1


@pytest.mark.unit
def test_lookup_tables_are_immutable():
    assert isinstance(HIGH_FREQUENCY_SYMBOLS, frozenset)
    assert isinstance(MAJOR_SYMBOLS, frozenset)


@pytest.mark.unit
def test_custom_tables_replace_defaults():
    classifier = HeuristicIntervalClassifier(
        high_frequency={"BTC"},
        meme_patterns=(),
        majors={"ZKJ"},
        large_denomination_prefixes=(),
    )
    assert classifier.classify("BTC") == 1
    assert classifier.classify("ZKJ") == 8
    assert classifier.classify("1000SATS") == 2
