"""Cache Module - match score and batch match caches."""
from core.cache.base import CacheBackend, CacheEntry
from core.cache.memory_backend import InMemoryCacheBackend
from core.cache.redis_backend import RedisCacheBackend
from core.cache.score_cache import ScoreCache
from core.cache.batch_cache import BatchMatchCache

__all__ = [
    'CacheBackend',
    'CacheEntry',
    'InMemoryCacheBackend',
    'RedisCacheBackend',
    'ScoreCache',
    'BatchMatchCache',
]
