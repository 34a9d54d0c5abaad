#!/usr/bin/env python3
"""
Scoring Models - Data structures for pair scores.
"""

from typing import List, Dict, Any
from dataclasses import dataclass, field, asdict
from enum import Enum
import math


class ScoreSource(str, Enum):
    """Provenance of a MatchScore."""
    MODEL = "model"
    FALLBACK = "fallback"


@dataclass
class MatchScore:
    """Compatibility score for one (student, project) pair."""
    overall: int
    skill_match: int
    interest_match: int
    experience_match: int
    reasoning: str
    matched_skills: List[str] = field(default_factory=list)
    suggestions: str = ""
    source: ScoreSource = ScoreSource.MODEL

    @property
    def is_fallback(self) -> bool:
        return self.source == ScoreSource.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['source'] = self.source.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchScore":
        return cls(
            overall=int(data['overall']),
            skill_match=int(data['skill_match']),
            interest_match=int(data['interest_match']),
            experience_match=int(data['experience_match']),
            reasoning=data.get('reasoning', ''),
            matched_skills=list(data.get('matched_skills') or []),
            suggestions=data.get('suggestions', ''),
            source=ScoreSource(data.get('source', ScoreSource.MODEL.value)),
        )


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))
