from .rate_service import RateService

__all__ = ['RateService']
