import json
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from redis import asyncio as redis

from domain.exceptions.currency import CacheError
from domain.models.rates import CurrencyCatalog, RateSet, TimeSeries
from infrastructure.cache.base import CachedValue

logger = logging.getLogger(__name__)


def _rates_to_json(rates: dict[str, Decimal]) -> dict[str, str]:
    return {code: str(rate) for code, rate in rates.items()}


def _rates_from_json(rates: dict[str, str]) -> dict[str, Decimal]:
    return {code: Decimal(rate) for code, rate in rates.items()}


def serialize(value: CachedValue) -> str:
    if isinstance(value, TimeSeries):
        payload: dict[str, Any] = {
            "type": "timeseries",
            "base_currency": value.base_currency,
            "amount": str(value.amount),
            "start_date": value.start_date.isoformat(),
            "end_date": value.end_date.isoformat(),
            "rates": {day.isoformat(): _rates_to_json(rates) for day, rates in value.rates.items()},
        }
    elif isinstance(value, RateSet):
        payload = {
            "type": "rates",
            "base_currency": value.base_currency,
            "amount": str(value.amount),
            "as_of": value.as_of.isoformat(),
            "rates": _rates_to_json(value.rates),
        }
    elif isinstance(value, CurrencyCatalog):
        payload = {"type": "currencies", "currencies": value.currencies}
    else:
        raise CacheError(f"Cannot cache value of type {type(value).__name__}")

    return json.dumps(payload)


def deserialize(data: str | bytes) -> CachedValue:
    try:
        payload = json.loads(data)
        kind = payload["type"]

        if kind == "currencies":
            return CurrencyCatalog(currencies=dict(payload["currencies"]))

        if kind == "timeseries":
            return TimeSeries(
                base_currency=payload["base_currency"],
                amount=Decimal(payload["amount"]),
                start_date=date.fromisoformat(payload["start_date"]),
                end_date=date.fromisoformat(payload["end_date"]),
                rates={
                    date.fromisoformat(day): _rates_from_json(rates)
                    for day, rates in payload["rates"].items()
                },
            )

        fields = dict(
            base_currency=payload["base_currency"],
            amount=Decimal(payload["amount"]),
            as_of=date.fromisoformat(payload["as_of"]),
            rates=_rates_from_json(payload["rates"]),
        )
        if kind == "rates":
            return RateSet(**fields)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
        raise CacheError(f"Invalid json data in cache: {e}") from e

    raise CacheError(f"Unknown cached value type: {kind}")


class RedisRateCache:
    """Redis-backed rate cache, for sharing fetched rates between processes"""

    def __init__(self, redis_client: redis.Redis, prefix: str = ""):
        self.redis = redis_client
        self.prefix = prefix

    def _make_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> CachedValue | None:
        data = await self.redis.get(self._make_key(key))

        if not data:
            logger.debug(f"Cache MISS for {key}")
            return None

        logger.debug(f"Cache HIT for {key}")
        return deserialize(data)

    async def set(self, key: str, value: CachedValue, ttl: timedelta) -> None:
        await self.redis.setex(self._make_key(key), ttl, serialize(value))
