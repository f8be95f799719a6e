from dataclasses import dataclass
from typing import Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class Entry(Generic[K, V]):
    """Represents a single cache entry with its metadata."""

    key: K
    value: V
    created_at: float
    last_access: Optional[float] = None

    def __post_init__(self):
        if self.last_access is None:
            self.last_access = self.created_at

    def is_expired(self, now: float, ttl: float) -> bool:
        """Expiry slides with access: the window starts at the last read."""
        return now - self.last_access > ttl

    def touch(self, now: float) -> None:
        self.last_access = now


@dataclass
class CacheStats:
    """Counters describing how lookups were served."""

    hits: int = 0
    misses: int = 0
    coalesced: int = 0  # callers that waited on another caller's load
    load_failures: int = 0
    evictions: int = 0
    expirations: int = 0

    def copy(self) -> "CacheStats":
        return CacheStats(**self.__dict__)
