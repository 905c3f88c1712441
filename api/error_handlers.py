import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.currency import (
	CircuitOpenError,
	ConfigurationError,
	DecodeError,
	InvalidRequestError,
	TransportError,
	UnsupportedCurrencyError,
	UpstreamError,
)

logger = logging.getLogger(__name__)


def _problem(status_code: int, title: str, detail: str) -> JSONResponse:
	return JSONResponse(
		status_code=status_code,
		content={'title': title, 'detail': detail, 'status': status_code},
	)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidRequestError)
	async def invalid_request_handler(request: Request, exc: InvalidRequestError):
		return _problem(400, 'Invalid request', str(exc))

	@app.exception_handler(UnsupportedCurrencyError)
	async def unsupported_currency_handler(request: Request, exc: UnsupportedCurrencyError):
		return _problem(400, 'Unsupported currency', str(exc))

	@app.exception_handler(ConfigurationError)
	async def configuration_error_handler(request: Request, exc: ConfigurationError):
		return _problem(400, 'Unsupported provider', str(exc))

	@app.exception_handler(TransportError)
	async def transport_error_handler(request: Request, exc: TransportError):
		logger.error(f'Upstream unreachable: {exc}')
		return _problem(503, 'Upstream unavailable', 'Exchange rate service unavailable')

	@app.exception_handler(CircuitOpenError)
	async def circuit_open_handler(request: Request, exc: CircuitOpenError):
		logger.warning(f'Rejected while circuit is open: {exc}')
		return _problem(503, 'Upstream unavailable', 'Exchange rate service unavailable')

	@app.exception_handler(UpstreamError)
	async def upstream_error_handler(request: Request, exc: UpstreamError):
		logger.error(f'Upstream error: {exc}')
		return _problem(502, 'Upstream error', 'Exchange rate service returned an error')

	@app.exception_handler(DecodeError)
	async def decode_error_handler(request: Request, exc: DecodeError):
		logger.error(f'Upstream payload could not be decoded: {exc}')
		return _problem(502, 'Upstream error', 'Exchange rate service returned an unexpected payload')
