from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Currency Rates API'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_FILE: str | None = None

	# Providers
	DEFAULT_PROVIDER: str = 'Frankfurter'
	FRANKFURTER_BASE_URL: str = 'https://api.frankfurter.dev/v1/'

	# Upstream resilience
	UPSTREAM_TIMEOUT: float = 30
	UPSTREAM_MAX_ATTEMPTS: int = 3
	UPSTREAM_BACKOFF_INITIAL: float = 1
	UPSTREAM_BACKOFF_MAX: float = 10
	UPSTREAM_BACKOFF_JITTER: float = 0.5
	BREAKER_FAILURE_THRESHOLD: int = 5
	BREAKER_FAILURE_WINDOW: float = 60
	BREAKER_RECOVERY_TIMEOUT: float = 30
	BREAKER_SUCCESS_THRESHOLD: int = 1

	# Cache
	CACHE_BACKEND: str = 'memory'
	CACHE_TTL_SECONDS: int = 600
	REDIS_URL: str = 'redis://localhost:6379'

	DEFAULT_PAGE_SIZE: int = 20

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
