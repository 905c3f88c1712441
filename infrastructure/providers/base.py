from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal

from domain.models.rates import CurrencyCatalog, HistoricalRateSet, RateSet, TimeSeries


class RateProvider(ABC):
    """Abstract base class for all rate providers - defines the contract"""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def get_latest(self, base_currency: str = "EUR", amount: Decimal = Decimal("1")) -> RateSet:
        ...

    @abstractmethod
    async def get_historical(
        self,
        on_date: date,
        base_currency: str = "EUR",
        amount: Decimal = Decimal("1"),
        page: int = 1,
        page_size: int = 20,
    ) -> HistoricalRateSet:
        ...

    @abstractmethod
    async def get_time_series(
        self,
        start_date: date,
        end_date: date,
        base_currency: str = "EUR",
        amount: Decimal = Decimal("1"),
        page: int = 1,
        page_size: int = 20,
    ) -> TimeSeries:
        ...

    @abstractmethod
    async def get_currencies(self) -> CurrencyCatalog:
        ...

    @abstractmethod
    async def is_base_supported(self, code: str) -> bool:
        ...

    async def close(self) -> None:
        pass

    def __repr__(self):
        return f"<{self.__class__.__name__}(name={self.name})>"
