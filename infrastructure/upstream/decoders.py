"""Turn decoded Frankfurter JSON payloads into domain models.

Every decoder raises ``DecodeError`` on a payload it does not recognise,
including an empty one; nothing here returns a partially filled model.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from domain.exceptions.currency import DecodeError
from domain.models.rates import CurrencyCatalog, RateSet, TimeSeries

_WIRE_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_CURRENCY_CODE = re.compile(r"[A-Za-z]{3}")


def parse_wire_date(value: Any) -> date:
    """Parse a ``yyyy-MM-dd`` date, rejecting every other spelling"""
    if not isinstance(value, str) or not _WIRE_DATE.fullmatch(value):
        raise DecodeError(f"Expected a yyyy-MM-dd date, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise DecodeError(f"Invalid date {value!r}: {e}") from e


def _require_object(payload: Any, what: str) -> dict:
    if not payload or not isinstance(payload, dict):
        raise DecodeError(f"Empty or malformed {what} payload")
    return payload


def _require(payload: dict, field: str) -> Any:
    try:
        return payload[field]
    except KeyError as e:
        raise DecodeError(f"Missing '{field}' in upstream payload") from e


def _decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise DecodeError(f"Non-numeric value for '{field}': {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise DecodeError(f"Non-numeric value for '{field}': {value!r}") from e


def _currency_code(value: Any) -> str:
    if not isinstance(value, str) or not _CURRENCY_CODE.fullmatch(value):
        raise DecodeError(f"Invalid currency code {value!r}")
    return value.upper()


def _rates(value: Any) -> dict[str, Decimal]:
    if not isinstance(value, dict):
        raise DecodeError("Expected 'rates' to be an object")
    if not value:
        raise DecodeError("Upstream payload carries no rates")
    return {_currency_code(code): _decimal(rate, code) for code, rate in value.items()}


def decode_rate_set(payload: Any) -> RateSet:
    payload = _require_object(payload, "rates")
    return RateSet(
        base_currency=_currency_code(_require(payload, "base")),
        amount=_decimal(_require(payload, "amount"), "amount"),
        as_of=parse_wire_date(_require(payload, "date")),
        rates=_rates(_require(payload, "rates")),
    )


def decode_time_series(payload: Any) -> TimeSeries:
    payload = _require_object(payload, "time series")
    raw_rates = _require(payload, "rates")
    if not isinstance(raw_rates, dict):
        raise DecodeError("Expected 'rates' to be an object keyed by date")
    if not raw_rates:
        raise DecodeError("Upstream time series carries no rates")

    return TimeSeries(
        base_currency=_currency_code(_require(payload, "base")),
        amount=_decimal(_require(payload, "amount"), "amount"),
        start_date=parse_wire_date(_require(payload, "start_date")),
        end_date=parse_wire_date(_require(payload, "end_date")),
        rates={parse_wire_date(day): _rates(rates) for day, rates in raw_rates.items()},
    )


def decode_currencies(payload: Any) -> CurrencyCatalog:
    payload = _require_object(payload, "currencies")
    currencies = {}
    for code, name in payload.items():
        if not isinstance(name, str):
            raise DecodeError(f"Invalid display name for {code!r}: {name!r}")
        currencies[_currency_code(code)] = name
    return CurrencyCatalog(currencies=currencies)
