import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from domain.exceptions.currency import DecodeError, TransportError, UpstreamError
from infrastructure.upstream.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpstreamClient:
    """HTTP client for the upstream rate source.

    Each attempt is bounded by ``timeout``; transport failures and non-2xx
    responses are retried with exponential backoff and jitter, and the circuit
    breaker gates the whole retry sequence.
    """

    def __init__(
        self,
        base_url: str,
        name: str = "upstream",
        timeout: float = 30,
        max_attempts: int = 3,
        breaker: CircuitBreaker | None = None,
        wait: wait_base | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.name = name
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.breaker = breaker or CircuitBreaker(provider_name=name)
        self.wait = wait or wait_exponential_jitter(initial=1, max=10, jitter=0.5)
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"accept": "application/json"},
        )

    async def fetch(
        self,
        path: str,
        params: dict[str, str] | None = None,
        decode: Callable[[Any], T] | None = None,
    ) -> T | Any:
        payload = await self.breaker.call(lambda: self._fetch_with_retry(path, params))
        return decode(payload) if decode else payload

    async def _fetch_with_retry(self, path: str, params: dict[str, str] | None) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait,
            retry=retry_if_exception_type((TransportError, UpstreamError)),
            before_sleep=self._log_retry,
            reraise=True,
        ):
            with attempt:
                payload = await self._request(path, params)
        return payload

    async def _request(self, path: str, params: dict[str, str] | None) -> Any:
        """Common HTTP request handling with timing and error management."""
        start_time = datetime.now()
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"{self.name} HTTP error {e.response.status_code}: {e.response.text[:200]}",
                status_code=e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise TransportError(f"{self.name} request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise TransportError(f"{self.name} request failed: {e.__class__.__name__}") from e

        response_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)
        logger.debug(f"GET {path} on {self.name}: {response.status_code} in {response_time_ms}ms")

        try:
            return response.json(parse_float=Decimal)
        except ValueError as e:
            raise DecodeError(f"{self.name} returned malformed JSON for {path}: {e}") from e

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Attempt {retry_state.attempt_number}/{self.max_attempts} to {self.name} failed: {exc}"
        )

    async def close(self):
        """Cleanly close the HTTP client."""
        await self.client.aclose()
