"""Matching Module - cache-aside scoring and bounded fan-out ranking."""
from core.matching.read_model import ProfileReadModel
from core.matching.singleflight import SingleFlight
from core.matching.metrics import EngineMetrics
from core.matching.engine import MatchingEngine

__all__ = [
    'MatchingEngine', 'ProfileReadModel', 'SingleFlight', 'EngineMetrics',
]
