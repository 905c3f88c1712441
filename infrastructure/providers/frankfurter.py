import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TypeVar

from domain.exceptions.currency import DecodeError, InvalidRequestError
from domain.fingerprint import RequestFingerprint, format_amount, format_date
from domain.models.rates import CurrencyCatalog, HistoricalRateSet, RateSet, TimeSeries
from domain.models.requests import Operation
from domain.pagination import paginate
from domain.policies.currency_filter import CurrencyFilter
from infrastructure.cache.base import CachedValue, RateCache
from infrastructure.providers.base import RateProvider
from infrastructure.upstream.client import UpstreamClient
from infrastructure.upstream.decoders import decode_currencies, decode_rate_set, decode_time_series

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=CachedValue)


def _validate_page(page: int, page_size: int) -> None:
    if page < 1:
        raise InvalidRequestError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise InvalidRequestError(f"page_size must be >= 1, got {page_size}")


class FrankfurterProvider(RateProvider):
    """Rates from the Frankfurter API (ECB reference rates).

    The cache always holds the unfiltered upstream payload, the currency
    filter is applied on the way out.
    """

    NAME = "Frankfurter"

    def __init__(
        self,
        client: UpstreamClient,
        cache: RateCache,
        currency_filter: CurrencyFilter | None = None,
        cache_ttl: timedelta = timedelta(minutes=10),
        today: Callable[[], date] | None = None,
    ):
        self.client = client
        self.cache = cache
        self.currency_filter = currency_filter or CurrencyFilter()
        self.cache_ttl = cache_ttl
        self._today = today or (lambda: datetime.now().date())

    @property
    def name(self) -> str:
        return self.NAME

    async def _cached(self, fingerprint: RequestFingerprint, fetch: Callable[[], Awaitable[T]]) -> T:
        key = fingerprint.key
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        value = await fetch()
        if value is None:
            raise DecodeError(f"{self.name} returned an empty payload for {key}")

        await self.cache.set(key, value, self.cache_ttl)
        return value

    @staticmethod
    def _params(base_currency: str, amount: Decimal) -> dict[str, str]:
        return {"from": base_currency, "amount": format_amount(amount)}

    async def get_latest(self, base_currency: str = "EUR", amount: Decimal = Decimal("1")) -> RateSet:
        base_currency = base_currency.strip().upper()
        fingerprint = RequestFingerprint(Operation.LATEST, base_currency=base_currency, amount=amount)

        upstream = await self._cached(
            fingerprint,
            lambda: self.client.fetch("latest", self._params(base_currency, amount), decode_rate_set),
        )

        return RateSet(
            base_currency=base_currency,
            amount=amount,
            as_of=upstream.as_of,
            rates=self.currency_filter.exclude(upstream.rates),
        )

    async def get_historical(
        self,
        on_date: date,
        base_currency: str = "EUR",
        amount: Decimal = Decimal("1"),
        page: int = 1,
        page_size: int = 20,
    ) -> HistoricalRateSet:
        if on_date > self._today():
            raise InvalidRequestError(f"Date {format_date(on_date)} is in the future")
        _validate_page(page, page_size)

        base_currency = base_currency.strip().upper()
        fingerprint = RequestFingerprint(
            Operation.HISTORICAL,
            dates=(on_date,),
            base_currency=base_currency,
            amount=amount,
            page=page,
            page_size=page_size,
        )

        upstream = await self._cached(
            fingerprint,
            lambda: self.client.fetch(
                format_date(on_date), self._params(base_currency, amount), decode_rate_set
            ),
        )

        result = paginate(self.currency_filter.exclude(upstream.rates), page, page_size)

        return HistoricalRateSet(
            base_currency=base_currency,
            amount=amount,
            as_of=on_date,
            rates=result.items,
            page=page,
            page_size=page_size,
            total_count=result.total_count,
        )

    async def get_time_series(
        self,
        start_date: date,
        end_date: date,
        base_currency: str = "EUR",
        amount: Decimal = Decimal("1"),
        page: int = 1,
        page_size: int = 20,
    ) -> TimeSeries:
        if start_date > end_date:
            raise InvalidRequestError(
                f"Start date {format_date(start_date)} is after end date {format_date(end_date)}"
            )
        _validate_page(page, page_size)

        base_currency = base_currency.strip().upper()
        fingerprint = RequestFingerprint(
            Operation.TIMESERIES,
            dates=(start_date, end_date),
            base_currency=base_currency,
            amount=amount,
            page=page,
            page_size=page_size,
        )
        path = f"{format_date(start_date)}..{format_date(end_date)}"

        upstream = await self._cached(
            fingerprint,
            lambda: self.client.fetch(path, self._params(base_currency, amount), decode_time_series),
        )

        result = paginate(upstream.rates, page, page_size)

        return TimeSeries(
            base_currency=base_currency,
            amount=amount,
            start_date=start_date,
            end_date=end_date,
            rates={day: self.currency_filter.exclude(rates) for day, rates in result.items.items()},
            page=page,
            page_size=page_size,
            total_count=result.total_count,
        )

    async def get_currencies(self) -> CurrencyCatalog:
        return await self._cached(
            RequestFingerprint(Operation.CURRENCIES),
            lambda: self.client.fetch("currencies", decode=decode_currencies),
        )

    async def is_base_supported(self, code: str) -> bool:
        code = code.strip().upper()
        catalog = await self.get_currencies()
        supported = self.currency_filter.is_supported(code, catalog)
        if not supported:
            logger.info(f"Base currency {code!r} is not supported by {self.name}")
        return supported

    async def close(self) -> None:
        await self.client.close()
