from dataclasses import dataclass
import datetime as dt
from decimal import Decimal
from enum import Enum


class Operation(Enum):
    LATEST = "latest"
    HISTORICAL = "historical"
    TIMESERIES = "timeseries"
    CURRENCIES = "currencies"
    SUPPORTED = "supported"


@dataclass(frozen=True)
class RateRequest:
    """A validated-at-the-edge request handed to the rate pipeline"""
    operation: Operation
    provider_name: str | None = None
    base_currency: str | None = None
    amount: Decimal | None = None
    date: dt.date | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    page: int | None = None
    page_size: int | None = None
