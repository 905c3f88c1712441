from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from infrastructure.cache.memory_cache import InMemoryRateCache
from infrastructure.providers.frankfurter import FrankfurterProvider
from infrastructure.upstream.client import UpstreamClient

TODAY = date(2024, 6, 14)

LATEST_PAYLOAD = {
    'amount': 1.0,
    'base': 'EUR',
    'date': '2024-06-14',
    'rates': {'USD': 1.1, 'TRY': 4.0},
}

HISTORICAL_PAYLOAD = {
    'amount': 1.0,
    'base': 'EUR',
    'date': '2024-01-02',
    'rates': {'USD': 1.1, 'GBP': 0.86, 'AUD': 1.62, 'PLN': 4.36, 'JPY': 155.7, 'MXN': 18.7},
}

TIMESERIES_PAYLOAD = {
    'amount': 1.0,
    'base': 'EUR',
    'start_date': '2024-01-02',
    'end_date': '2024-01-04',
    'rates': {
        '2024-01-04': {'USD': 1.09, 'THB': 37.5},
        '2024-01-02': {'USD': 1.1, 'THB': 37.9},
        '2024-01-03': {'USD': 1.095, 'THB': 37.7},
    },
}

CURRENCIES_PAYLOAD = {
    'EUR': 'Euro',
    'USD': 'United States Dollar',
    'GBP': 'British Pound',
    'TRY': 'Turkish Lira',
}


def payload_for(path: str):
    if path == 'latest':
        return LATEST_PAYLOAD
    if path == 'currencies':
        return CURRENCIES_PAYLOAD
    if '..' in path:
        return TIMESERIES_PAYLOAD
    return HISTORICAL_PAYLOAD


@pytest.fixture
def upstream():
    """UpstreamClient double that decodes canned Frankfurter payloads"""
    mock_upstream = AsyncMock(spec=UpstreamClient)

    async def fetch(path, params=None, decode=None):
        payload = payload_for(path)
        return decode(payload) if decode else payload

    mock_upstream.fetch.side_effect = fetch
    return mock_upstream


@pytest.fixture
def cache():
    return InMemoryRateCache()


@pytest.fixture
def provider(upstream, cache):
    return FrankfurterProvider(
        client=upstream,
        cache=cache,
        cache_ttl=timedelta(minutes=10),
        today=lambda: TODAY,
    )


@pytest.fixture
def today():
    return TODAY
