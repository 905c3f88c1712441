# nosec B101


import asyncio
from datetime import date, timedelta
from decimal import Decimal

import pytest

from domain.models.rates import CurrencyCatalog, RateSet
from infrastructure.cache.memory_cache import InMemoryRateCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_set():
    return RateSet(
        base_currency='EUR',
        amount=Decimal('1'),
        as_of=date(2024, 1, 2),
        rates={'USD': Decimal('1.1'), 'TRY': Decimal('4.0')},
    )


@pytest.mark.asyncio
async def test_get_returns_none_on_miss(clock):
    cache = InMemoryRateCache(clock=clock)
    assert await cache.get('latest_EUR_1') is None


@pytest.mark.asyncio
async def test_set_then_get_returns_equal_value(clock, rate_set):
    cache = InMemoryRateCache(clock=clock)

    await cache.set('latest_EUR_1', rate_set, timedelta(minutes=10))

    assert await cache.get('latest_EUR_1') == rate_set


@pytest.mark.asyncio
async def test_entry_expires_lazily(clock, rate_set):
    cache = InMemoryRateCache(clock=clock)
    await cache.set('latest_EUR_1', rate_set, timedelta(seconds=60))

    clock.now += 59
    assert await cache.get('latest_EUR_1') is not None

    clock.now += 1
    assert await cache.get('latest_EUR_1') is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_callers_get_copies(clock, rate_set):
    cache = InMemoryRateCache(clock=clock)
    await cache.set('latest_EUR_1', rate_set, timedelta(minutes=10))

    first = await cache.get('latest_EUR_1')
    first.rates['GBP'] = Decimal('0.85')
    rate_set.rates.clear()

    second = await cache.get('latest_EUR_1')
    assert second.rates == {'USD': Decimal('1.1'), 'TRY': Decimal('4.0')}


@pytest.mark.asyncio
async def test_last_set_wins(clock):
    cache = InMemoryRateCache(clock=clock)
    first = CurrencyCatalog(currencies={'EUR': 'Euro'})
    second = CurrencyCatalog(currencies={'EUR': 'Euro', 'USD': 'US Dollar'})

    await asyncio.gather(
        cache.set('currencies', first, timedelta(minutes=10)),
        cache.set('currencies', second, timedelta(minutes=10)),
    )

    assert await cache.get('currencies') == second


@pytest.mark.asyncio
async def test_keys_are_independent(clock, rate_set):
    cache = InMemoryRateCache(clock=clock)
    await cache.set('latest_EUR_1', rate_set, timedelta(minutes=10))

    assert await cache.get('latest_EUR_2') is None
    assert len(cache) == 1
