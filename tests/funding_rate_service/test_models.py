import pytest
from pydantic import ValidationError

from funding_rate_service.config import Settings
from funding_rate_service.models.funding_record import Exchange, FundingRecord, IntervalMethod


def _record(**overrides):
    fields = dict(
        exchange="binance",
        symbol="BTC",
        source_symbol="BTC/USDT:USDT",
        funding_interval_hours=8,
        interval_source=IntervalMethod.REPORTED,
    )
    fields.update(overrides)
    return FundingRecord(**fields)


@pytest.mark.unit
def test_builtin_exchanges_are_the_default_sources():
    assert Settings(_env_file=None).enabled_sources == [e.value for e in Exchange]


@pytest.mark.unit
def test_registered_sources_outside_the_enum_are_accepted():
    assert _record(exchange="okx").exchange == "okx"


@pytest.mark.unit
@pytest.mark.parametrize("hours", [0, 25])
def test_interval_outside_range_is_rejected(hours):
    with pytest.raises(ValidationError):
        _record(funding_interval_hours=hours)


@pytest.mark.unit
def test_records_are_immutable():
    record = _record()
    with pytest.raises(ValidationError):
        record.funding_interval_hours = 4
