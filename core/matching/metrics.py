"""Thread-safe counters for the matching engine."""
import threading
from collections import Counter
from typing import Dict

SCORE_CACHE_HITS = "score_cache_hits"
SCORE_CACHE_MISSES = "score_cache_misses"
BATCH_CACHE_HITS = "batch_cache_hits"
BATCH_CACHE_MISSES = "batch_cache_misses"
MODEL_SCORES = "model_scores"
FALLBACK_SCORES = "fallback_scores"
MODEL_TIMEOUTS = "model_timeouts"
SINGLEFLIGHT_JOINS = "singleflight_joins"
BATCHES_CANCELLED = "batches_cancelled"


class EngineMetrics:

    def __init__(self):
        self._lock = threading.Lock()
        self._counts: Counter = Counter()

    def incr(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._counts[name]

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
