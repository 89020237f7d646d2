"""Namespaced TTL cache."""

import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import Any, Callable, Optional

from ..config import Settings, settings as default_settings
from ..exceptions import CacheWriteError
from .backends import CacheBackend, JsonFileCacheBackend, MemoryCacheBackend
from .models import MISSING, CacheEntry, CacheResult, Found

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60


class TTLCache:
    """Key-value cache scoped to one namespace with lazy expiry.

    An entry is valid while ``now - lastUpdate <= ttl_seconds``; staleness
    is only checked on read, and an expired read deletes the entry.
    The ``*_async`` variants serialise access with an ``asyncio.Lock``.
    """

    def __init__(
        self,
        namespace: str,
        backend: CacheBackend,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        self.namespace = namespace
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = asyncio.Lock()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def set(self, key: str, value: Any) -> None:
        """
        Store a value, replacing any previous entry for ``key``.

        Raises:
            CacheWriteError: If a durable backend cannot persist the entry
        """
        self.backend.write(self.namespace, key, CacheEntry(data=value, last_update=self._now_ms()))

    async def set_async(self, key: str, value: Any) -> None:
        """Lock-protected async version of set."""
        async with self._lock:
            self.set(key, value)

    def get(self, key: str) -> CacheResult:
        """
        Look up a value.

        Returns:
            ``Found(value)`` for a fresh entry, ``MISSING`` when absent or expired
        """
        entry = self.backend.read(self.namespace, key)
        if entry is None:
            logger.debug(f"Cache miss for '{key}' in namespace {self.namespace}")
            return MISSING

        if entry.age_seconds(self._now_ms()) > self.ttl_seconds:
            logger.debug(f"Cache entry '{key}' expired in namespace {self.namespace}")
            try:
                self.backend.delete(self.namespace, key)
            except CacheWriteError as e:
                logger.warning(f"Could not drop expired cache entry '{key}': {e}")
            return MISSING

        logger.debug(f"Cache hit for '{key}' in namespace {self.namespace}")
        return Found(entry.data)

    async def get_async(self, key: str) -> CacheResult:
        """Lock-protected async version of get."""
        async with self._lock:
            return self.get(key)

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        self.backend.delete(self.namespace, key)

    async def delete_async(self, key: str) -> None:
        """Lock-protected async version of delete."""
        async with self._lock:
            self.delete(key)

    def clear(self) -> None:
        """Remove every entry of this namespace."""
        self.backend.clear(self.namespace)

    async def clear_async(self) -> None:
        """Lock-protected async version of clear."""
        async with self._lock:
            self.clear()

    def entries(self) -> dict[str, CacheEntry]:
        """Get every stored entry of this namespace, fresh or stale."""
        return self.backend.entries(self.namespace)


def build_backend(kind: str, cache_dir: Optional[Path] = None) -> CacheBackend:
    """Create a backend from its configured name ('json' or 'memory')."""
    if kind == "memory":
        return MemoryCacheBackend()
    if kind == "json":
        return JsonFileCacheBackend(cache_dir or default_settings.cache_dir)
    raise ValueError(f"Unknown cache backend: {kind!r}")


def create_cache(
    namespace: str,
    settings: Optional[Settings] = None,
    backend: Optional[CacheBackend] = None,
) -> TTLCache:
    """Create a TTLCache for ``namespace`` using configured backend and TTL."""
    settings = settings or default_settings
    if backend is None:
        backend = build_backend(settings.cache_backend, settings.cache_dir)
    return TTLCache(namespace, backend, ttl_seconds=settings.cache_ttl_seconds)


def clear_all_cache(cache_dir: Optional[Path] = None) -> bool:
    """
    Remove the whole durable cache directory.

    Returns:
        True if a directory was removed, False if there was nothing to remove
    """
    path = Path(cache_dir or default_settings.cache_dir)
    if not path.exists():
        return False
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise CacheWriteError(f"Failed to remove cache directory {path}: {e}") from e
    logger.info(f"Removed cache directory {path}")
    return True
