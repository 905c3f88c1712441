"""
Provider Registry - maps a provider name to the factory that builds it.
Adding an upstream source means registering one more factory here.
"""
import logging
from collections.abc import Callable
from datetime import timedelta

from tenacity import wait_exponential_jitter

from config.settings import Settings
from domain.exceptions.currency import ConfigurationError
from domain.policies.currency_filter import CurrencyFilter
from infrastructure.cache.base import RateCache
from infrastructure.providers.base import RateProvider
from infrastructure.providers.frankfurter import FrankfurterProvider
from infrastructure.upstream.circuit_breaker import CircuitBreaker
from infrastructure.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], RateProvider]


class ProviderRegistry:
    def __init__(self, factories: dict[str, ProviderFactory] | None = None, default: str = FrankfurterProvider.NAME):
        self._factories: dict[str, ProviderFactory] = dict(factories or {})
        self._instances: dict[str, RateProvider] = {}
        self.default = default

    def register(self, name: str, factory: ProviderFactory) -> None:
        if not name:
            raise ConfigurationError("Provider name must not be empty")
        self._factories[name] = factory

    def names(self) -> list[str]:
        return list(self._factories)

    def resolve(self, name: str | None) -> RateProvider:
        """
        Get the provider registered under ``name``.

        Lookup is exact and case-sensitive; ``None`` and ``""`` mean the
        default provider. Instances are built on first use and then reused.
        """
        key = name or self.default
        factory = self._factories.get(key)
        if factory is None:
            raise ConfigurationError(f"Provider {name} is not supported.")

        provider = self._instances.get(key)
        if provider is None:
            provider = factory()
            self._instances[key] = provider
            logger.info(f"Created rate provider {provider!r}")
        return provider

    async def aclose(self) -> None:
        for provider in self._instances.values():
            await provider.close()
        self._instances.clear()


def build_frankfurter_provider(
    settings: Settings,
    cache: RateCache,
    currency_filter: CurrencyFilter | None = None,
) -> FrankfurterProvider:
    breaker = CircuitBreaker(
        provider_name=FrankfurterProvider.NAME,
        failure_threshold=settings.BREAKER_FAILURE_THRESHOLD,
        recovery_timeout=settings.BREAKER_RECOVERY_TIMEOUT,
        success_threshold=settings.BREAKER_SUCCESS_THRESHOLD,
        failure_window=settings.BREAKER_FAILURE_WINDOW,
    )
    client = UpstreamClient(
        base_url=settings.FRANKFURTER_BASE_URL,
        name=FrankfurterProvider.NAME,
        timeout=settings.UPSTREAM_TIMEOUT,
        max_attempts=settings.UPSTREAM_MAX_ATTEMPTS,
        breaker=breaker,
        wait=wait_exponential_jitter(
            initial=settings.UPSTREAM_BACKOFF_INITIAL,
            max=settings.UPSTREAM_BACKOFF_MAX,
            jitter=settings.UPSTREAM_BACKOFF_JITTER,
        ),
    )
    return FrankfurterProvider(
        client=client,
        cache=cache,
        currency_filter=currency_filter,
        cache_ttl=timedelta(seconds=settings.CACHE_TTL_SECONDS),
    )


def build_registry(
    settings: Settings,
    cache: RateCache,
    currency_filter: CurrencyFilter | None = None,
) -> ProviderRegistry:
    registry = ProviderRegistry(default=settings.DEFAULT_PROVIDER)
    registry.register(
        FrankfurterProvider.NAME,
        lambda: build_frankfurter_provider(settings, cache, currency_filter),
    )
    return registry
