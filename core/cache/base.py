"""Cache backend interface and entry type shared by the match caches."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import CacheUnavailableException

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached value with explicit creation and expiry timestamps (epoch seconds)."""
    value: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(
            value=data["value"],
            created_at=float(data["created_at"]),
            expires_at=float(data["expires_at"]),
        )


class CacheBackend(ABC):
    """
    Key-value storage for cache entries.

    Backends store entries as given and never expire them on read; expiry is
    the cache layer's decision. Values must be JSON-serializable.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry]:
        pass

    @abstractmethod
    def set(self, key: str, entry: CacheEntry) -> bool:
        pass

    @abstractmethod
    def delete(self, *keys: str) -> int:
        """Delete keys, returning how many were removed.

        Raises CacheUnavailableException if the store cannot be reached.
        """
        pass

    @abstractmethod
    def keys(self, prefix: str) -> List[str]:
        pass

    @abstractmethod
    def items(self, prefix: str) -> List[Tuple[str, CacheEntry]]:
        pass

    def clear(self, prefix: str) -> int:
        """Delete every key under prefix."""
        keys = self.keys(prefix)
        if not keys:
            return 0
        return self.delete(*keys)


def evict_if_unchanged(backend: CacheBackend, key: str, seen: CacheEntry) -> bool:
    """Delete ``key`` only if it still holds ``seen``.

    Used for lazy expiry. The caller holds the lock its writes take, so a
    fresh entry stored after ``seen`` was read is left alone.
    """
    if backend.get(key) != seen:
        return False
    try:
        return backend.delete(key) > 0
    except CacheUnavailableException as e:
        # The entry stays expired and keeps reading as a miss
        logger.warning(f"Could not evict {key}: {e}")
        return False
