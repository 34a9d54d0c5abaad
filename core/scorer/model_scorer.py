#!/usr/bin/env python3
"""
Model Scorer - LLM-backed pair scoring.

Renders the matching prompt, asks the LLM provider for a structured score,
and validates the response. Every failure (transport error, timeout,
malformed or out-of-range output) is raised as ModelUnavailableException.
There is no retry here; the matching engine owns retry policy.
"""

from typing import List, Dict, Any
import logging

from pydantic import BaseModel, Field, ValidationError

from core.domain import StudentProfile, Project, ProjectExperience
from core.exceptions import ModelUnavailableException
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import is_retryable
from core.llm.schema_models import MATCH_SCORE_SCHEMA
from core.llm.system_prompts import MATCHING_SYSTEM_PROMPT, MATCHING_USER_TEMPLATE
from core.scorer.models import MatchScore, ScoreSource, round_half_up

logger = logging.getLogger(__name__)

EMPTY_VALUE = "None"


class ModelScoreOutput(BaseModel):
    """Expected shape of the model's response."""
    score: float = Field(ge=0, le=100)
    skill_match: float = Field(ge=0, le=100)
    interest_match: float = Field(ge=0, le=100)
    experience_match: float = Field(ge=0, le=100)
    reasoning: str
    matched_skills: List[str] = Field(default_factory=list)
    suggestions: str = ""


def format_experience(experiences: List[ProjectExperience]) -> str:
    if not experiences:
        return EMPTY_VALUE
    return "; ".join(f"{exp.title} ({exp.role}, {exp.duration})" for exp in experiences)


def _join(values: List[str]) -> str:
    cleaned = [v for v in values if v]
    return ", ".join(cleaned) if cleaned else EMPTY_VALUE


def render_prompt(student: StudentProfile, project: Project) -> str:
    """Render the user message for one (student, project) pair."""
    return MATCHING_USER_TEMPLATE.format(
        major=student.major or EMPTY_VALUE,
        grade=student.grade,
        gpa=student.gpa,
        skills=_join(student.skills),
        interests=_join(student.research_interests),
        experience=format_experience(student.project_experiences),
        academic_background=student.academic_background or EMPTY_VALUE,
        self_introduction=student.self_introduction or EMPTY_VALUE,
        project_title=project.title,
        project_description=project.description or EMPTY_VALUE,
        requirements=project.requirements or EMPTY_VALUE,
        required_skills=_join(project.required_skills),
        research_field=project.research_field or EMPTY_VALUE,
        duration=project.duration,
    )


def parse_model_output(data: Dict[str, Any]) -> MatchScore:
    """Validate raw model output and convert it to a MatchScore.

    Raises:
        ModelUnavailableException: If the output does not match the schema.
    """
    try:
        parsed = ModelScoreOutput.model_validate(data)
    except ValidationError as e:
        raise ModelUnavailableException(f"Malformed model output: {e.error_count()} validation error(s)") from e

    return MatchScore(
        overall=round_half_up(parsed.score),
        skill_match=round_half_up(parsed.skill_match),
        interest_match=round_half_up(parsed.interest_match),
        experience_match=round_half_up(parsed.experience_match),
        reasoning=parsed.reasoning,
        matched_skills=list(parsed.matched_skills),
        suggestions=parsed.suggestions,
        source=ScoreSource.MODEL,
    )


class ModelScorer:
    """Scores a pair by asking the LLM provider. Total-or-failing; never retries."""

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    def score(self, student: StudentProfile, project: Project) -> MatchScore:
        user_message = render_prompt(student, project)

        try:
            data = self.provider.generate_structured(
                system_prompt=MATCHING_SYSTEM_PROMPT,
                user_message=user_message,
                schema_spec=MATCH_SCORE_SCHEMA,
            )
        except ModelUnavailableException:
            raise
        except Exception as e:
            raise ModelUnavailableException(
                f"Scoring model call failed: {e.__class__.__name__}: {e}",
                retryable=is_retryable(e),
            ) from e

        if not isinstance(data, dict):
            raise ModelUnavailableException(f"Malformed model output: expected object, got {type(data).__name__}")

        score = parse_model_output(data)
        logger.debug(f"Model scored student {student.id} / project {project.id}: {score.overall}")
        return score
