class CurrencyException(Exception):
    pass


class InvalidRequestError(CurrencyException):
    pass


class UnsupportedCurrencyError(CurrencyException):
    def __init__(self, currency: str, provider_name: str | None = None):
        self.currency = currency
        self.provider_name = provider_name
        message = f"Currency '{currency}' is not supported"
        if provider_name:
            message += f" by provider '{provider_name}'"
        super().__init__(message)


class ConfigurationError(CurrencyException):
    pass


class ProviderError(CurrencyException):
    """Base class for failures talking to the upstream rate source"""
    pass


class TransportError(ProviderError):
    pass


class UpstreamError(ProviderError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class CircuitOpenError(UpstreamError):
    def __init__(self, provider_name: str, failure_count: int):
        self.provider_name = provider_name
        self.failure_count = failure_count
        super().__init__(f"Circuit breaker OPEN for {provider_name} ({failure_count} failures)")


class DecodeError(ProviderError):
    pass


class CacheError(CurrencyException):
    pass
