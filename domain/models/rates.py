from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class RateSet:
    base_currency: str
    amount: Decimal
    as_of: date
    rates: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class HistoricalRateSet(RateSet):
    page: int = 1
    page_size: int = 20
    total_count: int = 0

    @property
    def returned_count(self) -> int:
        return len(self.rates)


@dataclass(frozen=True)
class TimeSeries:
    base_currency: str
    amount: Decimal
    start_date: date
    end_date: date
    rates: dict[date, dict[str, Decimal]] = field(default_factory=dict)
    page: int = 1
    page_size: int = 20
    total_count: int = 0

    @property
    def returned_count(self) -> int:
        return len(self.rates)


@dataclass(frozen=True)
class CurrencyCatalog:
    """Every currency the upstream source recognises, code -> display name"""
    currencies: dict[str, str] = field(default_factory=dict)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self.currencies

    def __len__(self) -> int:
        return len(self.currencies)

    def codes(self) -> list[str]:
        return sorted(self.currencies)
