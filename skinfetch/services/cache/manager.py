import asyncio
import time
from collections import OrderedDict
from typing import (
    Awaitable,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Optional,
    TypeVar,
)

from ..base import BaseService
from .types import CacheStats, Entry
from ...utils.logger import logger

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Loader = Callable[[K], Awaitable[V]]

DEFAULT_MAX_SIZE = 1000
DEFAULT_TTL = 30 * 60.0

log = logger.getChild("cache")


class SingleFlightCache(BaseService, Generic[K, V]):
    """
    A bounded in-memory cache in front of an async loader.

    Entries expire once they have not been read for ``ttl`` seconds and the
    least recently read entry is evicted when an insert overflows
    ``max_size``. Concurrent lookups of a key that is not cached share one
    call to the loader; its result (or exception) is handed to every caller.
    Failed loads are not cached.
    """

    def __init__(
        self,
        loader: Loader,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            loader: Coroutine function resolving a key to its value.
            max_size: Maximum number of cached entries.
            ttl: Seconds an entry stays valid after its last access.
            clock: Monotonic time source, in seconds.
        """
        super().__init__()
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")

        self._loader = loader
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[K, Entry[K, V]]" = OrderedDict()
        self._in_flight: Dict[K, "asyncio.Task[V]"] = {}
        self._lock = asyncio.Lock()
        self._stats = CacheStats()

    async def start(self) -> None:
        self._started = True

    async def stop(self) -> None:
        """Cancel pending loads and drop every entry."""
        async with self._lock:
            pending = list(self._in_flight.values())
            self._in_flight.clear()
            self._entries.clear()
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._started = False

    async def is_healthy(self) -> bool:
        return self._started

    async def get(self, key: K) -> V:
        """
        Return the value for ``key``, loading it if it is absent or expired.

        Raises:
            ValueError: If ``key`` is None.
            Exception: Whatever the loader raised for this key's load.
        """
        if key is None:
            raise ValueError("key must not be None")

        async with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is not None:
                if not entry.is_expired(now, self.ttl):
                    entry.touch(now)
                    self._entries.move_to_end(key)
                    self._stats.hits += 1
                    return entry.value
                del self._entries[key]
                self._stats.expirations += 1

            task = self._in_flight.get(key)
            if task is None:
                self._stats.misses += 1
                task = asyncio.ensure_future(self._load(key))
                task.add_done_callback(_consume_exception)
                self._in_flight[key] = task
            else:
                self._stats.coalesced += 1

        # Shielded so that a cancelled caller leaves the load and the other
        # waiters alone.
        return await asyncio.shield(task)

    async def get_all(self, keys: Iterable[Optional[K]]) -> Dict[K, V]:
        """
        Resolve several keys concurrently.

        None keys are skipped. Keys whose load fails are left out of the
        result instead of failing the whole batch.
        """
        unique_keys = list(dict.fromkeys(k for k in keys if k is not None))
        if not unique_keys:
            return {}

        results = await asyncio.gather(
            *(self.get(k) for k in unique_keys), return_exceptions=True
        )

        resolved: Dict[K, V] = {}
        for key, result in zip(unique_keys, results):
            if isinstance(result, BaseException):
                log.warning(f"Lookup for {key} failed, omitting it: {result}")
                continue
            resolved[key] = result
        return resolved

    async def _load(self, key: K) -> V:
        log.debug(f"Loading {key}")
        try:
            value = await self._loader(key)
        except Exception as e:
            self._stats.load_failures += 1
            log.debug(f"Load for {key} failed: {e}")
            raise
        else:
            async with self._lock:
                self._insert(key, value)
            return value
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    def _insert(self, key: K, value: V) -> None:
        now = self._clock()
        self._entries[key] = Entry(key=key, value=value, created_at=now)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            log.debug(f"Evicted {evicted}")

    def contains(self, key: K) -> bool:
        """Check for a live entry without refreshing its access time."""
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock(), self.ttl)

    def invalidate(self, key: K) -> None:
        """Drop the cached entry for a key. A load in flight is not affected."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all entries from the cache."""
        self._entries.clear()

    def purge_expired(self) -> int:
        """
        Remove all expired entries from the cache.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired_keys = [
            key
            for key, entry in self._entries.items()
            if entry.is_expired(now, self.ttl)
        ]

        for key in expired_keys:
            del self._entries[key]

        self._stats.expirations += len(expired_keys)
        return len(expired_keys)

    @property
    def size(self) -> int:
        """Get the current number of entries in the cache."""
        return len(self._entries)

    @property
    def in_flight(self) -> int:
        """Number of loads currently running."""
        return len(self._in_flight)

    @property
    def stats(self) -> CacheStats:
        return self._stats.copy()


def _consume_exception(task: "asyncio.Task") -> None:
    # Every caller may have been cancelled before the load failed.
    if not task.cancelled():
        task.exception()
