#!/usr/bin/env python3
"""
Cache administration endpoints.

No authorization is applied here; deployments put these behind an admin gateway.
"""

import logging
from fastapi import APIRouter, Depends

from core.matching.engine import MatchingEngine
from ..dependencies import get_engine
from ..models.responses import CacheStatsResponse, CacheClearResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matching/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStatsResponse)
def get_cache_stats(engine: MatchingEngine = Depends(get_engine)):
    """Total and expired entry counts; expired entries are counted, not removed."""
    stats = engine.cache_stats()
    return CacheStatsResponse(
        success=True,
        score_cache=stats["score_cache"],
        batch_cache=stats["batch_cache"],
        metrics=engine.metrics.snapshot()
    )


@router.delete("", response_model=CacheClearResponse)
def clear_cache(engine: MatchingEngine = Depends(get_engine)):
    """Drop every cached score and ranked batch."""
    cleared = engine.clear_caches()
    logger.info(f"Match caches cleared: {cleared}")
    return CacheClearResponse(
        success=True,
        message="Match caches cleared",
        score_cache=cleared["score_cache"],
        batch_cache=cleared["batch_cache"]
    )
