"""Tests for AppContext wiring."""
from unittest.mock import MagicMock, patch

from core.app_context import AppContext
from core.cache import InMemoryCacheBackend
from core.config_loader import AppConfig


def _config(**cache):
    return AppConfig(
        database={"url": "sqlite://"},
        llm={"provider": "openrouter", "api_key": "sk-test", "request_timeout_seconds": 9},
        cache={"fallback_ttl_seconds": 120, "batch_ttl_seconds": 900, **cache},
        matching={"max_concurrency": 3},
    )


class TestAppContext:

    def test_build_wires_engine_and_services(self):
        ctx = AppContext.build(_config())
        try:
            engine = ctx.engine
            assert engine.config.max_concurrency == 3
            assert engine.score_cache.fallback_ttl_seconds == 120
            assert engine.batch_cache.ttl_seconds == 900
            # both caches share one backend
            assert engine.score_cache.backend is engine.batch_cache.backend
            assert isinstance(engine.score_cache.backend, InMemoryCacheBackend)
            assert engine.model_scorer.provider is ctx.ai_service
            assert ctx.profile_service.engine is engine
        finally:
            ctx.close()

    def test_ai_service_uses_provider_preset(self):
        ctx = AppContext.build(_config())
        try:
            assert ctx.ai_service.model == "deepseek/deepseek-chat"
            assert ctx.ai_service.timeout_seconds == 9
            assert str(ctx.ai_service.client.base_url).startswith("https://openrouter.ai/api/v1")
        finally:
            ctx.close()

    def test_redis_backend_used_when_available(self):
        redis_backend = MagicMock(is_available=True)
        with patch("core.app_context.RedisCacheBackend", return_value=redis_backend) as backend_cls:
            ctx = AppContext.build(_config(backend="redis", redis_url="redis://cache:6379/2"))
        try:
            assert ctx.engine.score_cache.backend is redis_backend
            assert backend_cls.call_args.kwargs["redis_url"] == "redis://cache:6379/2"
        finally:
            ctx.close()

    def test_unavailable_redis_falls_back_to_memory(self):
        with patch("core.app_context.RedisCacheBackend", return_value=MagicMock(is_available=False)):
            ctx = AppContext.build(_config(backend="redis"))
        try:
            assert isinstance(ctx.engine.score_cache.backend, InMemoryCacheBackend)
        finally:
            ctx.close()
