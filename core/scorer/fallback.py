#!/usr/bin/env python3
"""
Fallback Scorer - deterministic keyword scoring.

Used when the model path is unavailable or fails. Pure and total: never
raises, never blocks.

Formula: overall = 0.5 * skill + 0.3 * interest + 0.2 * experience

GPA and grade are not considered here.
"""

from typing import List

from core.domain import StudentProfile, Project
from core.scorer.models import MatchScore, ScoreSource, round_half_up

SKILL_WEIGHT = 0.5
INTEREST_WEIGHT = 0.3
EXPERIENCE_WEIGHT = 0.2

INTEREST_HIT = 70
INTEREST_MISS = 30
EXPERIENCE_PRESENT = 60
EXPERIENCE_ABSENT = 30

FALLBACK_REASONING = (
    "Scored with keyword matching because the scoring model is temporarily unavailable."
)
FALLBACK_SUGGESTIONS = "Strengthen the skills this project requires to improve your match."


def calculate_skill_match(student: StudentProfile, project: Project) -> float:
    """Percentage of distinct required skills (case-insensitive) the student has."""
    required = {s.strip().lower() for s in project.required_skills if s and s.strip()}
    if not required:
        return 0.0
    covered = required & student.skill_set()
    return len(covered) / len(required) * 100


def calculate_interest_match(student: StudentProfile, project: Project) -> int:
    field = (project.research_field or "").lower()
    for interest in student.research_interests:
        interest = (interest or "").strip().lower()
        # a blank tag would be a substring of every field
        if interest and interest in field:
            return INTEREST_HIT
    return INTEREST_MISS


def calculate_experience_match(student: StudentProfile) -> int:
    return EXPERIENCE_PRESENT if student.project_experiences else EXPERIENCE_ABSENT


def matched_required_skills(student: StudentProfile, project: Project) -> List[str]:
    """Required skills (project casing and order) present in the student's skills."""
    student_skills = student.skill_set()
    matched = []
    seen = set()
    for skill in project.required_skills:
        key = (skill or "").strip().lower()
        if key and key in student_skills and key not in seen:
            seen.add(key)
            matched.append(skill)
    return matched


class FallbackScorer:
    """Keyword-based scorer used whenever the model path fails."""

    def score(self, student: StudentProfile, project: Project) -> MatchScore:
        skill = calculate_skill_match(student, project)
        interest = calculate_interest_match(student, project)
        experience = calculate_experience_match(student)

        overall = round_half_up(
            skill * SKILL_WEIGHT + interest * INTEREST_WEIGHT + experience * EXPERIENCE_WEIGHT
        )

        return MatchScore(
            overall=max(0, min(100, overall)),
            skill_match=round_half_up(skill),
            interest_match=interest,
            experience_match=experience,
            reasoning=FALLBACK_REASONING,
            matched_skills=matched_required_skills(student, project),
            suggestions=FALLBACK_SUGGESTIONS,
            source=ScoreSource.FALLBACK,
        )
