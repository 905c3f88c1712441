import logging

from redis.asyncio import Redis

from application.services import RateService
from config.settings import Settings, get_settings
from domain.policies.currency_filter import CurrencyFilter
from infrastructure.cache.base import RateCache
from infrastructure.cache.memory_cache import InMemoryRateCache
from infrastructure.cache.redis_cache import RedisRateCache
from infrastructure.providers.registry import ProviderRegistry, build_registry

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	cache: RateCache | None = None
	redis_client: Redis | None = None
	currency_filter: CurrencyFilter | None = None
	registry: ProviderRegistry | None = None
	rate_service: RateService | None = None


deps = AppDependencies()


def build_cache(settings: Settings) -> RateCache:
	if settings.CACHE_BACKEND == 'redis':
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		return RedisRateCache(deps.redis_client)
	if settings.CACHE_BACKEND != 'memory':
		logger.warning(f'Unknown CACHE_BACKEND {settings.CACHE_BACKEND!r}, using in-memory cache')
	return InMemoryRateCache()


def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()

	deps.cache = build_cache(settings)
	deps.currency_filter = CurrencyFilter()
	deps.registry = build_registry(settings, deps.cache, deps.currency_filter)
	deps.rate_service = RateService(deps.registry, default_page_size=settings.DEFAULT_PAGE_SIZE)
	logger.info(f'Dependencies initialized (cache={settings.CACHE_BACKEND}, providers={deps.registry.names()})')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.registry:
		await deps.registry.aclose()
	if deps.redis_client:
		await deps.redis_client.aclose()

	logger.info('Cleanup complete')


def get_rate_service() -> RateService:
	if deps.rate_service is None:
		raise RuntimeError('Rate service not initialized')
	return deps.rate_service


def get_currency_filter() -> CurrencyFilter:
	if deps.currency_filter is None:
		raise RuntimeError('Currency filter not initialized')
	return deps.currency_filter
