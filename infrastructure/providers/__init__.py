from .base import RateProvider
from .frankfurter import FrankfurterProvider
from .registry import ProviderRegistry, build_registry

__all__ = ['FrankfurterProvider', 'ProviderRegistry', 'RateProvider', 'build_registry']
