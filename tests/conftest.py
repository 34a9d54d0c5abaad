"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
Reusable fakes live in tests/mocks/matching_mocks.py.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.cache import InMemoryCacheBackend, ScoreCache, BatchMatchCache
from core.config_loader import MatchingConfig
from core.matching.engine import MatchingEngine
from database.models import Base
from tests.mocks.matching_mocks import (
    CountingModelScorer,
    FakeClock,
    InMemoryReadModel,
)


def fast_matching_config(**overrides) -> MatchingConfig:
    """Matching config with retry waits disabled."""
    values = dict(
        max_concurrency=4,
        task_timeout_seconds=5.0,
        model_max_attempts=2,
        retry_initial_wait_seconds=0,
        retry_max_wait_seconds=0,
    )
    values.update(overrides)
    return MatchingConfig(**values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return InMemoryCacheBackend()


@pytest.fixture
def score_cache(backend, clock):
    return ScoreCache(backend, model_ttl_seconds=3600, fallback_ttl_seconds=60, clock=clock)


@pytest.fixture
def batch_cache(backend, clock):
    return BatchMatchCache(backend, ttl_seconds=600, fallback_ttl_seconds=60, clock=clock)


@pytest.fixture
def read_model():
    return InMemoryReadModel()


@pytest.fixture
def model_scorer():
    return CountingModelScorer()


@pytest.fixture
def engine(read_model, score_cache, batch_cache, model_scorer):
    engine = MatchingEngine(
        read_model=read_model,
        score_cache=score_cache,
        batch_cache=batch_cache,
        model_scorer=model_scorer,
        config=fast_matching_config()
    )
    yield engine
    engine.close()


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads; tables created fresh per test."""
    db_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(db_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    Base.metadata.drop_all(db_engine)
    db_engine.dispose()
