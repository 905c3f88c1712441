import copy
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from infrastructure.cache.base import CachedValue

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: CachedValue
    expires_at: float


class InMemoryRateCache:
    """Process-local TTL cache.

    Expired entries are dropped lazily on the next lookup. The lock only guards
    dict access, so concurrent writers to one key simply race and the last
    ``set`` wins. Values are deep-copied in and out so callers never share the
    stored object.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    async def get(self, key: str) -> CachedValue | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at <= now:
                del self._entries[key]
                entry = None

        if entry is None:
            logger.debug(f"Cache MISS for {key}")
            return None

        logger.debug(f"Cache HIT for {key}")
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: CachedValue, ttl: timedelta) -> None:
        entry = CacheEntry(value=copy.deepcopy(value), expires_at=self._clock() + ttl.total_seconds())
        with self._lock:
            self._entries[key] = entry
        logger.debug(f"Cache SET for {key} (ttl={ttl.total_seconds():.0f}s)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
