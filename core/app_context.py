import functools
import logging
from dataclasses import dataclass

from core.cache import (
    CacheBackend,
    InMemoryCacheBackend,
    RedisCacheBackend,
    ScoreCache,
    BatchMatchCache,
)
from core.config_loader import AppConfig, CacheConfig, LlmConfig
from core.llm.openai_service import OpenAIService
from core.matching.engine import MatchingEngine
from core.profile_service import ProfileService
from core.scorer import FallbackScorer, ModelScorer
from database.database import build_session_factory
from database.read_model import SqlProfileReadModel
from database.uow import profile_uow

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Build once per process: the matching engine owns worker pools and the
    caches hold the invalidation generations, so both must be shared by
    every caller that reads or mutates profiles.
    """
    config: AppConfig
    ai_service: OpenAIService
    engine: MatchingEngine
    profile_service: ProfileService

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance
        """
        ai_service = cls._build_ai_service(config.llm)

        backend = cls._build_cache_backend(config.cache)
        score_cache = ScoreCache(
            backend,
            model_ttl_seconds=config.cache.model_ttl_seconds,
            fallback_ttl_seconds=config.cache.fallback_ttl_seconds
        )
        batch_cache = BatchMatchCache(
            backend,
            ttl_seconds=config.cache.batch_ttl_seconds,
            fallback_ttl_seconds=config.cache.batch_fallback_ttl_seconds
        )

        session_factory = build_session_factory(config.database.url)
        engine = MatchingEngine(
            read_model=SqlProfileReadModel(session_factory),
            score_cache=score_cache,
            batch_cache=batch_cache,
            model_scorer=ModelScorer(ai_service),
            fallback_scorer=FallbackScorer(),
            config=config.matching
        )

        profile_service = ProfileService(
            uow=functools.partial(profile_uow, session_factory),
            engine=engine
        )

        return cls(
            config=config,
            ai_service=ai_service,
            engine=engine,
            profile_service=profile_service
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI-compatible scoring client from LLM configuration."""
        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.resolved_base_url(),
            model=llm_config.resolved_model(),
            temperature=llm_config.temperature,
            timeout_seconds=llm_config.request_timeout_seconds
        )

    @staticmethod
    def _build_cache_backend(cache_config: CacheConfig) -> CacheBackend:
        if cache_config.backend == "redis":
            backend = RedisCacheBackend(
                redis_url=cache_config.redis_url,
                password=cache_config.redis_password,
                retention_grace_seconds=cache_config.retention_grace_seconds
            )
            if backend.is_available:
                return backend
            # Caches hold generation counters in-process, so a local store is still correct
            logger.warning("Redis match cache unavailable, using in-memory cache")
        return InMemoryCacheBackend()

    def close(self) -> None:
        self.engine.close()
