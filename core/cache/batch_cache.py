"""
Batch Match Cache - full ranked student lists per project.

Stores the complete sorted list written by a full fan-out; callers truncate
on read. Empty lists are never stored.
"""
import logging
import threading
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple

from core.cache.base import CacheBackend, CacheEntry, evict_if_unchanged
from core.domain import StudentMatch

logger = logging.getLogger(__name__)

PROJECT_MATCHES_PREFIX = "match:project:"

DEFAULT_BATCH_TTL_SECONDS = 60 * 60
DEFAULT_BATCH_FALLBACK_TTL_SECONDS = 10 * 60

BatchToken = Tuple[int, int]


class BatchMatchCache:
    """Cache of ranked StudentMatch lists keyed by project id."""

    def __init__(
        self,
        backend: CacheBackend,
        ttl_seconds: int = DEFAULT_BATCH_TTL_SECONDS,
        fallback_ttl_seconds: int = DEFAULT_BATCH_FALLBACK_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.fallback_ttl_seconds = fallback_ttl_seconds
        self.clock = clock

        self._lock = threading.RLock()
        self._global_generation = 0
        self._project_generations: Dict[str, int] = defaultdict(int)

    @staticmethod
    def make_key(project_id: str) -> str:
        return f"{PROJECT_MATCHES_PREFIX}{project_id}"

    def ttl_for(self, matches: List[StudentMatch]) -> int:
        """Lists holding any fallback-derived score expire sooner."""
        if any(m.source == "fallback" for m in matches):
            return self.fallback_ttl_seconds
        return self.ttl_seconds

    def write_token(self, project_id: str) -> BatchToken:
        with self._lock:
            return (self._global_generation, self._project_generations[project_id])

    def get(self, project_id: str) -> Optional[List[StudentMatch]]:
        key = self.make_key(project_id)
        entry = self.backend.get(key)
        if entry is None:
            return None

        if entry.is_expired(self.clock()):
            logger.debug(f"Expired batch entry {key}, removing")
            with self._lock:
                evict_if_unchanged(self.backend, key, entry)
            return None

        try:
            return [StudentMatch.from_dict(item) for item in entry.value]
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable batch entry {key}: {e}")
            with self._lock:
                evict_if_unchanged(self.backend, key, entry)
            return None

    def put(
        self,
        project_id: str,
        matches: List[StudentMatch],
        ttl_seconds: Optional[int] = None,
        token: Optional[BatchToken] = None
    ) -> bool:
        """Store the full ranked list for a project.

        Returns False without writing when the list is empty or an
        invalidation happened since ``token`` was taken.
        """
        if not matches:
            return False

        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_for(matches)
        now = self.clock()
        entry = CacheEntry(
            value=[m.to_dict() for m in matches],
            created_at=now,
            expires_at=now + ttl
        )
        key = self.make_key(project_id)

        with self._lock:
            if token is not None and token != self.write_token(project_id):
                logger.debug(f"Skipping stale batch write for {key}")
                return False
            return self.backend.set(key, entry)

    def invalidate(self, project_id: str) -> bool:
        with self._lock:
            self._project_generations[project_id] += 1
            removed = self.backend.delete(self.make_key(project_id)) > 0
        if removed:
            logger.info(f"Invalidated batch matches for project {project_id}")
        return removed

    def invalidate_by_student(self, student_id: str) -> int:
        """Drop every project batch.

        Each batch ranks every student, and a newly created student appears
        in none of them, so no batch can be kept after a profile change.
        """
        with self._lock:
            self._global_generation += 1
            removed = self.backend.clear(PROJECT_MATCHES_PREFIX)
        logger.info(f"Invalidated {removed} batch entries after change to student {student_id}")
        return removed

    def stats(self) -> Dict[str, int]:
        now = self.clock()
        entries = self.backend.items(PROJECT_MATCHES_PREFIX)
        expired = sum(1 for _, entry in entries if entry.is_expired(now))
        return {"total_entries": len(entries), "expired_entries": expired}

    def clear_all(self) -> int:
        with self._lock:
            self._global_generation += 1
            removed = self.backend.clear(PROJECT_MATCHES_PREFIX)
        logger.info(f"Cleared {removed} batch entries")
        return removed
