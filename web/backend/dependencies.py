#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import logging
from functools import lru_cache

from core.app_context import AppContext
from core.matching.engine import MatchingEngine
from core.profile_service import ProfileService
from .config import get_config

logger = logging.getLogger(__name__)


@lru_cache()
def get_app_context() -> AppContext:
    """
    Process-wide application context.

    The engine and its caches must be shared by every request, otherwise
    invalidations from one request would not reach the caches of another.
    Tests replace this with app.dependency_overrides.
    """
    logger.info("Building application context")
    return AppContext.build(get_config())


def get_engine() -> MatchingEngine:
    """
    FastAPI dependency that returns the shared matching engine.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(engine: MatchingEngine = Depends(get_engine)):
            ...
    """
    return get_app_context().engine


def get_profile_service() -> ProfileService:
    return get_app_context().profile_service
