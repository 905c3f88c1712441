from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class Page(Generic[K, V]):
    items: dict[K, V] = field(default_factory=dict)
    total_count: int = 0

    @property
    def returned_count(self) -> int:
        return len(self.items)


def paginate(mapping: Mapping[K, V], page: int, page_size: int) -> Page[K, V]:
    """Order ``mapping`` by key and return the requested 1-based page.

    A page past the end is empty but still reports the full ``total_count``.
    """
    if page < 1 or page_size < 1:
        raise ValueError(f"page and page_size must be >= 1 (got page={page}, page_size={page_size})")

    ordered: list[tuple[Any, V]] = sorted(mapping.items(), key=lambda item: item[0])
    offset = (page - 1) * page_size
    return Page(items=dict(ordered[offset:offset + page_size]), total_count=len(ordered))
