"""Storage backends for the TTL cache.

A backend only stores entries; expiry is decided by ``TTLCache``.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..exceptions import CacheWriteError
from .models import CacheEntry

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class CacheBackend(ABC):
    """Namespace-qualified entry storage."""

    @abstractmethod
    def read(self, namespace: str, key: str) -> Optional[CacheEntry]:
        """Return the entry for ``key`` or None."""
        pass

    @abstractmethod
    def write(self, namespace: str, key: str, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key``, replacing any previous entry."""
        pass

    @abstractmethod
    def delete(self, namespace: str, key: str) -> None:
        """Remove ``key`` if present."""
        pass

    @abstractmethod
    def clear(self, namespace: str) -> None:
        """Remove every entry of ``namespace``."""
        pass

    @abstractmethod
    def entries(self, namespace: str) -> dict[str, CacheEntry]:
        """Return a copy of every entry of ``namespace``."""
        pass


class MemoryCacheBackend(CacheBackend):
    """Volatile registry shared by every namespace that is given it.

    Entries live for the lifetime of this object; create one and pass it to
    each cache that should share it.
    """

    def __init__(self):
        self._entries: dict[tuple[str, str], CacheEntry] = {}

    def read(self, namespace: str, key: str) -> Optional[CacheEntry]:
        return self._entries.get((namespace, key))

    def write(self, namespace: str, key: str, entry: CacheEntry) -> None:
        self._entries[(namespace, key)] = entry

    def delete(self, namespace: str, key: str) -> None:
        self._entries.pop((namespace, key), None)

    def clear(self, namespace: str) -> None:
        for entry_key in [k for k in self._entries if k[0] == namespace]:
            del self._entries[entry_key]

    def entries(self, namespace: str) -> dict[str, CacheEntry]:
        return {key: entry for (ns, key), entry in self._entries.items() if ns == namespace}


class JsonFileCacheBackend(CacheBackend):
    """Durable backend: one JSON object per namespace.

    Files live at ``<cache_dir>/<namespace>.json`` with the shape
    ``{key: {"lastUpdate": <epoch ms>, "data": ...}}``. Every write reads the
    whole file, mutates it and writes it back; there is no locking, so a
    namespace file must have a single writer.
    """

    def __init__(self, cache_dir: Path):
        self.cache_dir = Path(cache_dir)

    def path_for(self, namespace: str) -> Path:
        """Get the file backing ``namespace``."""
        return self.cache_dir / f"{_UNSAFE_FILENAME_CHARS.sub('_', namespace)}.json"

    def _load(self, namespace: str) -> dict[str, CacheEntry]:
        """Load a namespace file. Any read problem yields an empty mapping."""
        path = self.path_for(namespace)
        if not path.exists():
            return {}

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {path}: {e}")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring cache file {path}: expected a JSON object")
            return {}

        loaded: dict[str, CacheEntry] = {}
        for key, value in raw.items():
            try:
                loaded[key] = CacheEntry.model_validate(value)
            except ValidationError:
                logger.warning(f"Skipping malformed cache entry '{key}' in {path}")
        return loaded

    def _dump(self, namespace: str, data: dict[str, CacheEntry]) -> None:
        path = self.path_for(namespace)
        payload = {key: entry.to_json_dict() for key, entry in data.items()}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise CacheWriteError(f"Failed to write cache file {path}: {e}") from e

    def read(self, namespace: str, key: str) -> Optional[CacheEntry]:
        return self._load(namespace).get(key)

    def write(self, namespace: str, key: str, entry: CacheEntry) -> None:
        data = self._load(namespace)
        data[key] = entry
        self._dump(namespace, data)

    def delete(self, namespace: str, key: str) -> None:
        data = self._load(namespace)
        if key not in data:
            return
        del data[key]
        self._dump(namespace, data)

    def clear(self, namespace: str) -> None:
        path = self.path_for(namespace)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise CacheWriteError(f"Failed to remove cache file {path}: {e}") from e

    def entries(self, namespace: str) -> dict[str, CacheEntry]:
        return self._load(namespace)
