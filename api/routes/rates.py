from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_currency_filter, get_rate_service
from api.schemas import (
	CurrenciesResponse,
	CurrencyRatesResponse,
	CurrencySupportResponse,
	HistoricalRatesResponse,
	LatestRatesQuery,
	PagedRatesQuery,
	TimeSeriesQuery,
	TimeSeriesResponse,
)
from application.services import RateService
from domain.exceptions.currency import UnsupportedCurrencyError
from domain.policies.currency_filter import CurrencyFilter

router = APIRouter(prefix='/api/v1', tags=['rates'])


def _reject_excluded(currency_filter: CurrencyFilter, query: LatestRatesQuery) -> None:
	if currency_filter.is_excluded(query.base_currency):
		raise UnsupportedCurrencyError(query.base_currency)


@router.get(
	'/rates/latest',
	response_model=CurrencyRatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get latest exchange rates',
)
async def get_latest_rates(
	query: Annotated[LatestRatesQuery, Query()],
	service: Annotated[RateService, Depends(get_rate_service)],
	currency_filter: Annotated[CurrencyFilter, Depends(get_currency_filter)],
) -> CurrencyRatesResponse:
	_reject_excluded(currency_filter, query)
	result = await service.get_latest(query.base_currency, query.amount, provider_name=query.provider)
	return CurrencyRatesResponse.from_domain(result)


@router.get(
	'/rates/historical/{on_date}',
	response_model=HistoricalRatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get paginated historical exchange rates for a date',
)
async def get_historical_rates(
	on_date: Annotated[date, Path(description='Date in yyyy-MM-dd format')],
	query: Annotated[PagedRatesQuery, Query()],
	service: Annotated[RateService, Depends(get_rate_service)],
	currency_filter: Annotated[CurrencyFilter, Depends(get_currency_filter)],
) -> HistoricalRatesResponse:
	_reject_excluded(currency_filter, query)
	result = await service.get_historical(
		on_date,
		query.base_currency,
		query.amount,
		page=query.page,
		page_size=query.page_size,
		provider_name=query.provider,
	)
	return HistoricalRatesResponse.from_domain(result)


@router.get(
	'/rates/timeseries',
	response_model=TimeSeriesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get paginated exchange rates over a date range',
)
async def get_time_series(
	query: Annotated[TimeSeriesQuery, Query()],
	service: Annotated[RateService, Depends(get_rate_service)],
	currency_filter: Annotated[CurrencyFilter, Depends(get_currency_filter)],
) -> TimeSeriesResponse:
	_reject_excluded(currency_filter, query)
	result = await service.get_time_series(
		query.start_date,
		query.end_date,
		query.base_currency,
		query.amount,
		page=query.page,
		page_size=query.page_size,
		provider_name=query.provider,
	)
	return TimeSeriesResponse.from_domain(result)


@router.get(
	'/currencies',
	response_model=CurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List currencies known to the provider',
)
async def get_currencies(
	service: Annotated[RateService, Depends(get_rate_service)],
	provider: Annotated[str | None, Query()] = None,
) -> CurrenciesResponse:
	catalog = await service.get_currencies(provider_name=provider)
	return CurrenciesResponse.from_domain(catalog)


@router.get(
	'/currencies/{code}/supported',
	response_model=CurrencySupportResponse,
	status_code=status.HTTP_200_OK,
	summary='Check whether a currency can be used as a base currency',
)
async def is_currency_supported(
	code: Annotated[str, Path(min_length=3, max_length=3)],
	service: Annotated[RateService, Depends(get_rate_service)],
	provider: Annotated[str | None, Query()] = None,
) -> CurrencySupportResponse:
	supported = await service.is_supported(code, provider_name=provider)
	return CurrencySupportResponse(
		currency=code.strip().upper(), provider=service.provider_name(provider), supported=supported
	)
