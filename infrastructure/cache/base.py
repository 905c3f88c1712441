from datetime import timedelta
from typing import Protocol

from domain.models.rates import CurrencyCatalog, RateSet, TimeSeries

CachedValue = RateSet | TimeSeries | CurrencyCatalog


class RateCache(Protocol):
    """Key-value store for upstream results with a fixed time-to-live"""

    async def get(self, key: str) -> CachedValue | None:
        ...

    async def set(self, key: str, value: CachedValue, ttl: timedelta) -> None:
        ...
