from .requests import LatestRatesQuery, PagedRatesQuery, TimeSeriesQuery
from .responses import (
	CurrenciesResponse,
	CurrencyRatesResponse,
	CurrencySupportResponse,
	HistoricalRatesResponse,
	TimeSeriesResponse,
)

__all__ = [
	'CurrenciesResponse',
	'CurrencyRatesResponse',
	'CurrencySupportResponse',
	'HistoricalRatesResponse',
	'LatestRatesQuery',
	'PagedRatesQuery',
	'TimeSeriesQuery',
	'TimeSeriesResponse',
]
