"""TTL cache with volatile and durable backends."""

from .backends import CacheBackend, JsonFileCacheBackend, MemoryCacheBackend
from .models import MISSING, CacheEntry, CacheResult, Found
from .store import (
    DEFAULT_TTL_SECONDS,
    TTLCache,
    build_backend,
    clear_all_cache,
    create_cache,
)

__all__ = [
    "CacheBackend",
    "JsonFileCacheBackend",
    "MemoryCacheBackend",
    "MISSING",
    "CacheEntry",
    "CacheResult",
    "Found",
    "DEFAULT_TTL_SECONDS",
    "TTLCache",
    "build_backend",
    "clear_all_cache",
    "create_cache",
]
