"""Redis cache backend - shared match cache storage across processes."""
import json
import logging
import math
import time
from typing import Optional, List, Tuple
from urllib.parse import urlparse

from redis import Redis

from core.cache.base import CacheBackend, CacheEntry
from core.exceptions import CacheUnavailableException

logger = logging.getLogger(__name__)

# Entries outlive their expires_at by this much so stats() can report them as expired
DEFAULT_RETENTION_GRACE_SECONDS = 24 * 60 * 60


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except Exception:
        return url


class RedisCacheBackend(CacheBackend):
    """
    Redis storage for match cache entries.

    Entries are stored as JSON with explicit created_at/expires_at. The Redis
    key TTL is the entry lifetime plus a retention grace period, so Redis
    itself compacts garbage while lazily-expired entries stay visible to
    stats(). Read and write errors are logged and degrade to a miss / no-op;
    delete and scan errors raise CacheUnavailableException so that a failed
    invalidation is never mistaken for an empty one.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        retention_grace_seconds: int = DEFAULT_RETENTION_GRACE_SECONDS,
        client: Optional[Redis] = None
    ):
        self.redis_url = redis_url
        self.retention_grace_seconds = retention_grace_seconds
        self._redis: Optional[Redis] = None
        self._available = False

        try:
            self._redis = client or Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Match cache connected to Redis at {_sanitize_url(redis_url)}")
        except Exception as e:
            logger.warning(f"Match cache Redis unavailable: {e}")
            self._redis = None
            self._available = False

    @property
    def is_available(self) -> bool:
        return self._available and self._redis is not None

    def get(self, key: str) -> Optional[CacheEntry]:
        if not self.is_available:
            return None

        try:
            data = self._redis.get(key)
            if not data:
                return None
            return CacheEntry.from_dict(json.loads(data))
        except Exception as e:
            logger.warning(f"Error reading {key} from match cache: {e}")
            return None

    def set(self, key: str, entry: CacheEntry) -> bool:
        if not self.is_available:
            return False

        try:
            remaining = max(1, math.ceil(entry.expires_at - time.time()))
            self._redis.setex(key, remaining + self.retention_grace_seconds, json.dumps(entry.to_dict()))
            return True
        except Exception as e:
            logger.warning(f"Error writing {key} to match cache: {e}")
            return False

    def delete(self, *keys: str) -> int:
        if not self.is_available or not keys:
            return 0

        try:
            return int(self._redis.delete(*keys))
        except Exception as e:
            logger.warning(f"Error deleting from match cache: {e}")
            raise CacheUnavailableException(f"Match cache delete failed: {e}") from e

    def keys(self, prefix: str) -> List[str]:
        if not self.is_available:
            return []

        found = []
        try:
            cursor = 0
            while True:
                cursor, batch = self._redis.scan(cursor=cursor, match=f"{prefix}*", count=1000)
                found.extend(batch)
                if cursor == 0:
                    break
        except Exception as e:
            logger.warning(f"Error scanning match cache keys: {e}")
            raise CacheUnavailableException(f"Match cache scan failed: {e}") from e
        return found

    def items(self, prefix: str) -> List[Tuple[str, CacheEntry]]:
        try:
            keys = self.keys(prefix)
        except CacheUnavailableException:
            return []
        if not keys:
            return []

        result = []
        try:
            values = self._redis.mget(keys)
        except Exception as e:
            logger.warning(f"Error reading match cache entries: {e}")
            return []

        for key, raw in zip(keys, values):
            # key may have been deleted between SCAN and MGET
            if not raw:
                continue
            try:
                result.append((key, CacheEntry.from_dict(json.loads(raw))))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Skipping unreadable match cache entry {key}: {e}")
        return result
