import datetime
import random

import pytest

from finboard.portfolio.market_data import BASE_QUOTES, MarketDataError, MockMarketDataProvider, is_market_open


@pytest.fixture
def provider(response_cache):
    return MockMarketDataProvider(response_cache=response_cache, rng=random.Random(7))


def test_known_symbol_fluctuates_within_one_percent(provider):
    quote = provider.fetch("tcs")

    base_cmp, pe_ratio, earnings = BASE_QUOTES["TCS"]
    assert base_cmp * 0.99 <= quote.cmp <= base_cmp * 1.01
    assert quote.pe_ratio == pe_ratio
    assert quote.latest_earnings == earnings


def test_unknown_symbol_gets_generated_quote(provider):
    quote = provider.fetch("NEWCO")
    assert 99 <= quote.cmp <= 5151
    assert 10 <= quote.pe_ratio <= 40


def test_quotes_are_cached(provider, clock):
    first = provider.fetch("INFY")
    assert provider.fetch("INFY") is first

    clock.advance(60)
    assert provider.fetch("INFY") is not first


def test_blank_symbol(provider):
    with pytest.raises(MarketDataError):
        provider.fetch("  ")


IST = datetime.timezone(datetime.timedelta(hours=5, minutes=30))


@pytest.mark.parametrize(
    "at, expected",
    [
        (datetime.datetime(2024, 6, 3, 9, 15, tzinfo=IST), True),  # Monday open
        (datetime.datetime(2024, 6, 3, 15, 30, 59, tzinfo=IST), True),
        (datetime.datetime(2024, 6, 3, 15, 31, tzinfo=IST), False),
        (datetime.datetime(2024, 6, 3, 9, 14, tzinfo=IST), False),
        (datetime.datetime(2024, 6, 8, 11, 0, tzinfo=IST), False),  # Saturday
        (datetime.datetime(2024, 6, 3, 4, 0, tzinfo=datetime.UTC), True),  # 09:30 IST
        (datetime.datetime(2024, 6, 3, 12, 0), True),  # naive is IST
    ],
)
def test_is_market_open(at, expected):
    assert is_market_open(at) is expected
