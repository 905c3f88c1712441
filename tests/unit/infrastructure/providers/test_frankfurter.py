# nosec B101


import asyncio
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from domain.exceptions.currency import DecodeError, InvalidRequestError, TransportError
from domain.models.rates import CurrencyCatalog, HistoricalRateSet, RateSet, TimeSeries
from domain.policies.currency_filter import CurrencyFilter
from infrastructure.providers.frankfurter import FrankfurterProvider
from infrastructure.upstream.client import UpstreamClient


# ============================================================================
# get_latest
# ============================================================================

@pytest.mark.asyncio
async def test_latest_filters_denylisted_and_caches_unfiltered(provider, upstream, cache):
    result = await provider.get_latest('EUR', Decimal('1'))

    assert isinstance(result, RateSet)
    assert result.rates == {'USD': Decimal('1.1')}
    assert result.base_currency == 'EUR'
    assert result.amount == Decimal('1')
    assert result.as_of == date(2024, 6, 14)

    cached = await cache.get('latest_EUR_1')
    assert cached.rates == {'USD': Decimal('1.1'), 'TRY': Decimal('4.0')}

    upstream.fetch.assert_called_once()
    path, params, _ = upstream.fetch.call_args[0]
    assert path == 'latest'
    assert params == {'from': 'EUR', 'amount': '1'}


@pytest.mark.asyncio
async def test_latest_second_call_is_served_from_cache(provider, upstream):
    await provider.get_latest('EUR', Decimal('1'))
    await provider.get_latest('eur', Decimal('1.0'))

    assert upstream.fetch.call_count == 1


@pytest.mark.asyncio
async def test_latest_returns_cached_data_without_fetching(provider, upstream, cache):
    cached = RateSet(
        base_currency='EUR',
        amount=Decimal('1'),
        as_of=date(2024, 6, 1),
        rates={'USD': Decimal('1.2'), 'GBP': Decimal('0.85')},
    )
    await cache.set('latest_EUR_1', cached, timedelta(minutes=10))

    result = await provider.get_latest('EUR', Decimal('1'))

    assert result.rates == cached.rates
    upstream.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_latest_amount_is_carried_verbatim(provider):
    result = await provider.get_latest('EUR', Decimal('250.50'))
    assert result.amount == Decimal('250.50')


@pytest.mark.asyncio
async def test_denylist_change_applies_to_cached_data(upstream, cache):
    strict = FrankfurterProvider(upstream, cache, CurrencyFilter(excluded={'TRY', 'USD'}))
    lenient = FrankfurterProvider(upstream, cache, CurrencyFilter(excluded=set()))

    assert (await strict.get_latest('EUR', Decimal('1'))).rates == {}
    assert (await lenient.get_latest('EUR', Decimal('1'))).rates == {
        'USD': Decimal('1.1'), 'TRY': Decimal('4.0'),
    }
    assert upstream.fetch.call_count == 1


@pytest.mark.asyncio
async def test_upstream_failure_propagates_and_is_not_cached(provider, upstream, cache):
    upstream.fetch.side_effect = TransportError('down')

    with pytest.raises(TransportError):
        await provider.get_latest('EUR', Decimal('1'))

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_empty_decoded_value_is_decode_error(cache):
    upstream = AsyncMock()
    upstream.fetch.return_value = None
    provider = FrankfurterProvider(upstream, cache)

    with pytest.raises(DecodeError):
        await provider.get_latest('EUR', Decimal('1'))

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_empty_rates_payload_is_decode_error_and_not_cached(cache):
    upstream = AsyncMock(spec=UpstreamClient)

    async def fetch(path, params=None, decode=None):
        return decode({'amount': 1.0, 'base': 'EUR', 'date': '2024-06-14', 'rates': {}})

    upstream.fetch.side_effect = fetch
    provider = FrankfurterProvider(upstream, cache, today=lambda: date(2024, 6, 14))

    with pytest.raises(DecodeError):
        await provider.get_latest('EUR', Decimal('1'))
    with pytest.raises(DecodeError):
        await provider.get_historical(date(2024, 6, 14), 'EUR', Decimal('1'))

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_concurrent_misses_both_fetch_and_leave_one_entry(cache):
    release = asyncio.Event()
    upstream = AsyncMock(spec=UpstreamClient)

    async def fetch(path, params=None, decode=None):
        await release.wait()
        return decode({'amount': 1.0, 'base': 'EUR', 'date': '2024-06-14', 'rates': {'USD': 1.1, 'TRY': 4.0}})

    upstream.fetch.side_effect = fetch
    provider = FrankfurterProvider(upstream, cache)

    first = asyncio.create_task(provider.get_latest('EUR', Decimal('1')))
    second = asyncio.create_task(provider.get_latest('EUR', Decimal('1')))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(first, second)

    assert upstream.fetch.call_count == 2
    assert results[0] == results[1]
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_base_currency_is_trimmed_before_fetch(provider, upstream, cache):
    result = await provider.get_latest(' eur ', Decimal('1'))

    assert result.base_currency == 'EUR'
    _, params, _ = upstream.fetch.call_args[0]
    assert params['from'] == 'EUR'
    assert await cache.get('latest_EUR_1') is not None


# ============================================================================
# get_historical
# ============================================================================

@pytest.mark.asyncio
async def test_historical_filters_orders_and_paginates(provider, upstream):
    result = await provider.get_historical(date(2024, 1, 2), 'EUR', Decimal('1'), page=1, page_size=2)

    assert isinstance(result, HistoricalRateSet)
    assert list(result.rates) == ['AUD', 'GBP']
    assert result.total_count == 4
    assert result.returned_count == 2
    assert result.page == 1
    assert result.page_size == 2
    assert result.as_of == date(2024, 1, 2)

    path, params, _ = upstream.fetch.call_args[0]
    assert path == '2024-01-02'
    assert params == {'from': 'EUR', 'amount': '1'}


@pytest.mark.asyncio
async def test_historical_last_and_out_of_range_pages(provider):
    last = await provider.get_historical(date(2024, 1, 2), 'EUR', Decimal('1'), page=2, page_size=3)
    beyond = await provider.get_historical(date(2024, 1, 2), 'EUR', Decimal('1'), page=5, page_size=3)

    assert list(last.rates) == ['USD']
    assert last.total_count == 4
    assert beyond.rates == {}
    assert beyond.returned_count == 0
    assert beyond.total_count == 4


@pytest.mark.asyncio
async def test_historical_cache_key(provider, cache):
    await provider.get_historical(date(2024, 1, 2), 'EUR', Decimal('1'), page=1, page_size=20)

    assert await cache.get('historical_2024-01-02_EUR_1_1_20') is not None


@pytest.mark.asyncio
async def test_historical_future_date_rejected_before_io(provider, upstream, cache, today):
    cache.get = AsyncMock(wraps=cache.get)

    with pytest.raises(InvalidRequestError):
        await provider.get_historical(today + timedelta(days=1), 'EUR', Decimal('1'))

    upstream.fetch.assert_not_called()
    cache.get.assert_not_called()


@pytest.mark.asyncio
async def test_historical_today_is_allowed(provider, today):
    result = await provider.get_historical(today, 'EUR', Decimal('1'))
    assert result.as_of == today


@pytest.mark.asyncio
@pytest.mark.parametrize('page,page_size', [(0, 20), (1, 0)])
async def test_historical_invalid_page_rejected(provider, upstream, page, page_size):
    with pytest.raises(InvalidRequestError):
        await provider.get_historical(date(2024, 1, 2), 'EUR', Decimal('1'), page=page, page_size=page_size)

    upstream.fetch.assert_not_called()


# ============================================================================
# get_time_series
# ============================================================================

@pytest.mark.asyncio
async def test_time_series_paginates_over_dates(provider, upstream):
    result = await provider.get_time_series(
        date(2024, 1, 2), date(2024, 1, 4), 'EUR', Decimal('1'), page=1, page_size=2,
    )

    assert isinstance(result, TimeSeries)
    assert list(result.rates) == [date(2024, 1, 2), date(2024, 1, 3)]
    assert result.total_count == 3
    assert result.returned_count == 2
    assert result.rates[date(2024, 1, 2)] == {'USD': Decimal('1.1')}

    path, params, _ = upstream.fetch.call_args[0]
    assert path == '2024-01-02..2024-01-04'
    assert params == {'from': 'EUR', 'amount': '1'}


@pytest.mark.asyncio
async def test_time_series_second_page(provider):
    result = await provider.get_time_series(
        date(2024, 1, 2), date(2024, 1, 4), 'EUR', Decimal('1'), page=2, page_size=2,
    )

    assert list(result.rates) == [date(2024, 1, 4)]
    assert result.total_count == 3


@pytest.mark.asyncio
async def test_time_series_start_after_end_rejected(provider, upstream):
    with pytest.raises(InvalidRequestError):
        await provider.get_time_series(date(2024, 1, 4), date(2024, 1, 2), 'EUR', Decimal('1'))

    upstream.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_time_series_cached(provider, upstream):
    for _ in range(3):
        await provider.get_time_series(date(2024, 1, 2), date(2024, 1, 4), 'EUR', Decimal('1'))

    assert upstream.fetch.call_count == 1


# ============================================================================
# get_currencies / is_base_supported
# ============================================================================

@pytest.mark.asyncio
async def test_currencies_are_not_filtered(provider, upstream):
    catalog = await provider.get_currencies()

    assert isinstance(catalog, CurrencyCatalog)
    assert 'TRY' in catalog.currencies
    assert len(catalog) == 4
    assert upstream.fetch.call_args[0][0] == 'currencies'


@pytest.mark.asyncio
async def test_is_base_supported(provider, upstream):
    assert await provider.is_base_supported('usd') is True
    assert await provider.is_base_supported(' usd ') is True
    assert await provider.is_base_supported('TRY') is False
    assert await provider.is_base_supported('try') is False
    assert await provider.is_base_supported('JPY') is False

    assert upstream.fetch.call_count == 1


@pytest.mark.asyncio
async def test_close_closes_upstream(provider, upstream):
    await provider.close()
    upstream.close.assert_awaited_once()
