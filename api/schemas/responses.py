import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from domain.models.rates import CurrencyCatalog, HistoricalRateSet, RateSet, TimeSeries


class CurrencyRatesResponse(BaseModel):
	amount: Decimal = Field(..., description='Amount of the base currency converted')
	base: str = Field(..., description='Base currency code')
	date: dt.date
	rates: dict[str, Decimal] = Field(..., description='Converted amount per target currency')

	@classmethod
	def from_domain(cls, result: RateSet) -> 'CurrencyRatesResponse':
		return cls(amount=result.amount, base=result.base_currency, date=result.as_of, rates=result.rates)


class PageBasedResponse(BaseModel):
	current_page: int
	page_size: int
	total_rates_count: int
	rates_count: int


class HistoricalRatesResponse(PageBasedResponse):
	amount: Decimal
	base: str
	date: dt.date
	rates: dict[str, Decimal]

	@classmethod
	def from_domain(cls, result: HistoricalRateSet) -> 'HistoricalRatesResponse':
		return cls(
			amount=result.amount,
			base=result.base_currency,
			date=result.as_of,
			rates=result.rates,
			current_page=result.page,
			page_size=result.page_size,
			total_rates_count=result.total_count,
			rates_count=result.returned_count,
		)


class TimeSeriesResponse(PageBasedResponse):
	amount: Decimal
	base: str
	start_date: dt.date
	end_date: dt.date
	rates: dict[dt.date, dict[str, Decimal]]

	@classmethod
	def from_domain(cls, result: TimeSeries) -> 'TimeSeriesResponse':
		return cls(
			amount=result.amount,
			base=result.base_currency,
			start_date=result.start_date,
			end_date=result.end_date,
			rates=result.rates,
			current_page=result.page,
			page_size=result.page_size,
			total_rates_count=result.total_count,
			rates_count=result.returned_count,
		)


class CurrenciesResponse(BaseModel):
	currencies: dict[str, str] = Field(description='Currency code to display name')

	class ConfigDict:
		json_schema_extra = {'examples': [{'currencies': {'EUR': 'Euro', 'USD': 'United States Dollar'}}]}

	@classmethod
	def from_domain(cls, catalog: CurrencyCatalog) -> 'CurrenciesResponse':
		return cls(currencies=catalog.currencies)


class CurrencySupportResponse(BaseModel):
	currency: str
	provider: str
	supported: bool
