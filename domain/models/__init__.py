from .rates import CurrencyCatalog, HistoricalRateSet, RateSet, TimeSeries
from .requests import Operation, RateRequest

__all__ = [
    'CurrencyCatalog',
    'HistoricalRateSet',
    'Operation',
    'RateRequest',
    'RateSet',
    'TimeSeries',
]
