#!/usr/bin/env python3
"""
Scoring Module - pair scorers.

Public API:
- ModelScorer: LLM-backed scorer (raises ModelUnavailableException on any failure)
- FallbackScorer: deterministic keyword scorer (never fails)
- MatchScore / ScoreSource: score result and its provenance

- models.py: Data structures (MatchScore, ScoreSource)
- fallback.py: Keyword scoring formulas
- model_scorer.py: Prompt rendering and response parsing
"""

from core.scorer.models import MatchScore, ScoreSource
from core.scorer.fallback import FallbackScorer
from core.scorer.model_scorer import ModelScorer

__all__ = ['MatchScore', 'ScoreSource', 'FallbackScorer', 'ModelScorer']
