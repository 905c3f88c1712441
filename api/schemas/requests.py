from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator


class LatestRatesQuery(BaseModel):
	provider: str | None = None
	base_currency: str = Field('EUR', min_length=3, max_length=3)
	amount: Decimal = Field(Decimal('1'), gt=0)

	@field_validator('base_currency')
	@classmethod
	def uppercase_currency(cls, v: str):
		return v.upper()


class PagedRatesQuery(LatestRatesQuery):
	page: int = Field(1, ge=1)
	page_size: int = Field(20, ge=1)


class TimeSeriesQuery(PagedRatesQuery):
	start_date: date
	end_date: date

	@model_validator(mode='after')
	def start_not_after_end(self):
		if self.start_date > self.end_date:
			raise ValueError('Start date must be less than or equal to end date.')
		return self
