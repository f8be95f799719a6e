from skinfetch.services.cache.manager import SingleFlightCache
from skinfetch.services.cache.types import CacheStats, Entry

__all__ = ["SingleFlightCache", "CacheStats", "Entry"]
