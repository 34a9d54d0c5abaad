"""In-process cache backend."""
import threading
from typing import Dict, List, Optional, Tuple

from core.cache.base import CacheBackend, CacheEntry


class InMemoryCacheBackend(CacheBackend):
    """Thread-safe dict-backed storage. Entries live until deleted."""

    def __init__(self):
        self._data: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, entry: CacheEntry) -> bool:
        with self._lock:
            self._data[key] = entry
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                if self._data.pop(key, None) is not None:
                    removed += 1
        return removed

    def keys(self, prefix: str) -> List[str]:
        with self._lock:
            return [k for k in self._data if k.startswith(prefix)]

    def items(self, prefix: str) -> List[Tuple[str, CacheEntry]]:
        with self._lock:
            return [(k, v) for k, v in self._data.items() if k.startswith(prefix)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
