from collections.abc import Iterable, Mapping
from typing import TypeVar

from domain.models.rates import CurrencyCatalog

V = TypeVar("V")

# Conversion targets withheld from every rate mapping we return.
DEFAULT_EXCLUDED_CURRENCIES: frozenset[str] = frozenset({"TRY", "PLN", "THB", "MXN"})


class CurrencyFilter:
    """Applies the currency denylist to rate mappings and base-currency checks.

    The denylist is fixed for the lifetime of the filter. It restricts which
    currencies can appear as conversion targets (and as a base), it does not
    hide them from the currency catalog.
    """

    def __init__(self, excluded: Iterable[str] = DEFAULT_EXCLUDED_CURRENCIES):
        self._excluded = frozenset(code.upper() for code in excluded)

    @property
    def excluded(self) -> frozenset[str]:
        return self._excluded

    def is_excluded(self, code: str) -> bool:
        return code.upper() in self._excluded

    def exclude(self, rates: Mapping[str, V]) -> dict[str, V]:
        return {code: value for code, value in rates.items() if not self.is_excluded(code)}

    def is_supported(self, code: str | None, catalog: CurrencyCatalog | None) -> bool:
        if not code or catalog is None or len(catalog) == 0:
            return False
        return code in catalog and not self.is_excluded(code)

    def __repr__(self):
        return f"<{self.__class__.__name__}(excluded={sorted(self._excluded)})>"
