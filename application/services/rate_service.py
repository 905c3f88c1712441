import logging
from datetime import date, datetime
from decimal import Decimal

from domain.exceptions.currency import InvalidRequestError, UnsupportedCurrencyError
from domain.models.rates import CurrencyCatalog, HistoricalRateSet, RateSet, TimeSeries
from domain.models.requests import Operation, RateRequest
from infrastructure.providers.base import RateProvider
from infrastructure.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

RateResult = RateSet | HistoricalRateSet | TimeSeries | CurrencyCatalog | bool

DEFAULT_BASE_CURRENCY = "EUR"
DEFAULT_AMOUNT = Decimal("1")


class RateService:
    """Entry point of the rate pipeline for a logical request.

    Validates the request before any I/O, resolves the provider and refuses
    base currencies the provider does not support.
    """

    def __init__(self, registry: ProviderRegistry, default_page_size: int = 20, today=None):
        self.registry = registry
        self.default_page_size = default_page_size
        self._today = today or (lambda: datetime.now().date())

    async def execute(self, request: RateRequest) -> RateResult:
        self._validate(request)
        provider = self.registry.resolve(request.provider_name)

        if request.operation == Operation.CURRENCIES:
            return await provider.get_currencies()

        if request.operation == Operation.SUPPORTED:
            if not request.base_currency:
                raise InvalidRequestError("base_currency is required")
            return await provider.is_base_supported(request.base_currency.strip().upper())

        base_currency = (request.base_currency or DEFAULT_BASE_CURRENCY).strip().upper()
        await self._ensure_supported(provider, base_currency)

        amount = request.amount if request.amount is not None else DEFAULT_AMOUNT
        page = request.page or 1
        page_size = request.page_size or self.default_page_size

        if request.operation == Operation.LATEST:
            return await provider.get_latest(base_currency, amount)

        if request.operation == Operation.HISTORICAL:
            return await provider.get_historical(request.date, base_currency, amount, page, page_size)

        return await provider.get_time_series(
            request.start_date, request.end_date, base_currency, amount, page, page_size
        )

    async def get_latest(self, base_currency: str, amount: Decimal = DEFAULT_AMOUNT,
                         provider_name: str | None = None) -> RateSet:
        return await self.execute(RateRequest(
            Operation.LATEST, provider_name=provider_name, base_currency=base_currency, amount=amount,
        ))

    async def get_historical(self, on_date: date, base_currency: str, amount: Decimal = DEFAULT_AMOUNT,
                             page: int = 1, page_size: int | None = None,
                             provider_name: str | None = None) -> HistoricalRateSet:
        return await self.execute(RateRequest(
            Operation.HISTORICAL, provider_name=provider_name, base_currency=base_currency,
            amount=amount, date=on_date, page=page, page_size=page_size,
        ))

    async def get_time_series(self, start_date: date, end_date: date, base_currency: str,
                              amount: Decimal = DEFAULT_AMOUNT, page: int = 1, page_size: int | None = None,
                              provider_name: str | None = None) -> TimeSeries:
        return await self.execute(RateRequest(
            Operation.TIMESERIES, provider_name=provider_name, base_currency=base_currency,
            amount=amount, start_date=start_date, end_date=end_date, page=page, page_size=page_size,
        ))

    async def get_currencies(self, provider_name: str | None = None) -> CurrencyCatalog:
        return await self.execute(RateRequest(Operation.CURRENCIES, provider_name=provider_name))

    async def is_supported(self, code: str, provider_name: str | None = None) -> bool:
        return await self.execute(RateRequest(
            Operation.SUPPORTED, provider_name=provider_name, base_currency=code,
        ))

    def provider_name(self, name: str | None = None) -> str:
        """Name of the provider that serves ``name``, falling back to the default"""
        return self.registry.resolve(name).name

    async def _ensure_supported(self, provider: RateProvider, base_currency: str) -> None:
        if not await provider.is_base_supported(base_currency):
            raise UnsupportedCurrencyError(base_currency, provider.name)

    def _validate(self, request: RateRequest) -> None:
        if request.amount is not None and request.amount <= 0:
            raise InvalidRequestError("Amount should be greater than zero")
        if request.base_currency is not None and len(request.base_currency.strip()) != 3:
            raise InvalidRequestError(f"Invalid currency code '{request.base_currency}'")
        if request.page is not None and request.page < 1:
            raise InvalidRequestError(f"page must be >= 1, got {request.page}")
        if request.page_size is not None and request.page_size < 1:
            raise InvalidRequestError(f"page_size must be >= 1, got {request.page_size}")

        if request.operation == Operation.HISTORICAL:
            if request.date is None:
                raise InvalidRequestError("date is required")
            if request.date > self._today():
                raise InvalidRequestError("Date must be in the past.")

        if request.operation == Operation.TIMESERIES:
            if request.start_date is None or request.end_date is None:
                raise InvalidRequestError("start_date and end_date are required")
            if request.start_date > request.end_date:
                raise InvalidRequestError("Start date must be less than or equal to end date.")
