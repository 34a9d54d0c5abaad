"""
Score Cache - memoized (student, project) pair scores.

Expiry is lazy: an expired entry reads as a miss and is deleted on the way,
but nothing sweeps in the background, and stats() reports expired entries
without removing them.

Writes are guarded by a write token: the invalidation epoch observed before
the profiles being scored were read. Every invalidation advances the epoch
and records it against the student or project it touched, so a score
computed from profiles read before an invalidation cannot be written after
it. Take the token before loading profiles, not after the cache miss.
"""
import logging
import threading
import time
from typing import Callable, Dict, Optional

from core.cache.base import CacheBackend, CacheEntry, evict_if_unchanged
from core.scorer.models import MatchScore

logger = logging.getLogger(__name__)

SCORE_PREFIX = "match:score:"

DEFAULT_MODEL_TTL_SECONDS = 6 * 60 * 60
DEFAULT_FALLBACK_TTL_SECONDS = 10 * 60

WriteToken = int


class ScoreCache:
    """Cache of MatchScore values keyed by (student_id, project_id)."""

    def __init__(
        self,
        backend: CacheBackend,
        model_ttl_seconds: int = DEFAULT_MODEL_TTL_SECONDS,
        fallback_ttl_seconds: int = DEFAULT_FALLBACK_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        self.backend = backend
        self.model_ttl_seconds = model_ttl_seconds
        self.fallback_ttl_seconds = fallback_ttl_seconds
        self.clock = clock

        self._lock = threading.RLock()
        self._epoch = 0
        self._cleared_at = 0
        self._student_invalidated_at: Dict[str, int] = {}
        self._project_invalidated_at: Dict[str, int] = {}

    @staticmethod
    def make_key(student_id: str, project_id: str) -> str:
        return f"{SCORE_PREFIX}{student_id}:{project_id}"

    def ttl_for(self, score: MatchScore) -> int:
        return self.fallback_ttl_seconds if score.is_fallback else self.model_ttl_seconds

    def write_token(self) -> WriteToken:
        """Current invalidation epoch. Valid for any pair until that pair is invalidated."""
        with self._lock:
            return self._epoch

    def is_current(self, student_id: str, project_id: str, token: WriteToken) -> bool:
        with self._lock:
            last_invalidated = max(
                self._cleared_at,
                self._student_invalidated_at.get(student_id, 0),
                self._project_invalidated_at.get(project_id, 0),
            )
            return last_invalidated <= token

    def _advance_epoch(self) -> int:
        self._epoch += 1
        return self._epoch

    def get(self, student_id: str, project_id: str) -> Optional[MatchScore]:
        key = self.make_key(student_id, project_id)
        entry = self.backend.get(key)
        if entry is None:
            return None

        if entry.is_expired(self.clock()):
            logger.debug(f"Expired score entry {key}, removing")
            with self._lock:
                evict_if_unchanged(self.backend, key, entry)
            return None

        try:
            return MatchScore.from_dict(entry.value)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable score entry {key}: {e}")
            with self._lock:
                evict_if_unchanged(self.backend, key, entry)
            return None

    def put(
        self,
        student_id: str,
        project_id: str,
        score: MatchScore,
        ttl_seconds: Optional[int] = None,
        token: Optional[WriteToken] = None
    ) -> bool:
        """Store a score, overwriting any previous entry with a fresh TTL.

        If ``token`` is given and the pair has been invalidated since it was
        taken, the write is skipped and False is returned.
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_for(score)
        now = self.clock()
        entry = CacheEntry(value=score.to_dict(), created_at=now, expires_at=now + ttl)
        key = self.make_key(student_id, project_id)

        with self._lock:
            if token is not None and not self.is_current(student_id, project_id, token):
                logger.debug(f"Skipping stale write for {key}: invalidated during computation")
                return False
            return self.backend.set(key, entry)

    def invalidate(self, student_id: str, project_id: str) -> bool:
        key = self.make_key(student_id, project_id)
        with self._lock:
            self._student_invalidated_at[student_id] = self._advance_epoch()
            return self.backend.delete(key) > 0

    def invalidate_by_student(self, student_id: str) -> int:
        """Remove every cached score for this student.

        Raises CacheUnavailableException if the store could not be cleared.
        In-flight writes for the student are rejected either way.
        """
        with self._lock:
            self._student_invalidated_at[student_id] = self._advance_epoch()
            removed = self.backend.clear(f"{SCORE_PREFIX}{student_id}:")
        logger.info(f"Invalidated {removed} cached scores for student {student_id}")
        return removed

    def invalidate_by_project(self, project_id: str) -> int:
        """Remove every cached score for this project."""
        suffix = f":{project_id}"
        with self._lock:
            self._project_invalidated_at[project_id] = self._advance_epoch()
            keys = [k for k in self.backend.keys(SCORE_PREFIX) if k.endswith(suffix)]
            removed = self.backend.delete(*keys) if keys else 0
        logger.info(f"Invalidated {removed} cached scores for project {project_id}")
        return removed

    def stats(self) -> Dict[str, int]:
        now = self.clock()
        entries = self.backend.items(SCORE_PREFIX)
        expired = sum(1 for _, entry in entries if entry.is_expired(now))
        return {"total_entries": len(entries), "expired_entries": expired}

    def clear_all(self) -> int:
        with self._lock:
            self._cleared_at = self._advance_epoch()
            removed = self.backend.clear(SCORE_PREFIX)
        logger.info(f"Cleared {removed} cached scores")
        return removed
