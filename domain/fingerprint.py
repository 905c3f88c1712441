from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from domain.models.requests import Operation

WIRE_DATE_FORMAT = "%Y-%m-%d"


def format_amount(amount: Decimal | int | str) -> str:
    """Canonical text for an amount: ``Decimal("1.0")``, ``1`` and ``"1.00"`` all give ``"1"``"""
    value = Decimal(str(amount)).normalize()
    return format(value, "f")


def format_date(value: date) -> str:
    return value.strftime(WIRE_DATE_FORMAT)


@dataclass(frozen=True)
class RequestFingerprint:
    """Deterministic cache key for a rate request.

    Fields are encoded in declaration order, ``None`` fields are skipped.
    """
    operation: Operation
    dates: tuple[date, ...] = ()
    base_currency: str | None = None
    amount: Decimal | None = None
    page: int | None = None
    page_size: int | None = None

    @property
    def key(self) -> str:
        parts = [self.operation.value]
        parts.extend(format_date(d) for d in self.dates)
        if self.base_currency is not None:
            parts.append(self.base_currency.strip().upper())
        if self.amount is not None:
            parts.append(format_amount(self.amount))
        if self.page is not None:
            parts.append(str(self.page))
        if self.page_size is not None:
            parts.append(str(self.page_size))
        return "_".join(parts)

    def __str__(self) -> str:
        return self.key
