#!/usr/bin/env python3
"""
Domain Models - Students, their project experience, research projects,
and the ranked results built from them.

These are plain dataclasses handed to the scorers by the read model. They
are detached from any database session.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Any


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"
    COMPLETED = "completed"


@dataclass
class ProjectExperience:
    """A past project listed on a student's profile."""
    title: str
    role: str
    duration: str
    achievements: str = ""
    id: str = ""


@dataclass
class StudentProfile:
    """Student profile used for matching. ``id`` is the owning user's id."""
    id: str
    major: str
    grade: int
    gpa: float
    skills: List[str] = field(default_factory=list)
    research_interests: List[str] = field(default_factory=list)
    academic_background: str = ""
    self_introduction: str = ""
    project_experiences: List[ProjectExperience] = field(default_factory=list)

    def skill_set(self) -> set:
        """Lower-cased skill tags; duplicates in the source list collapse."""
        return {s.strip().lower() for s in self.skills if s and s.strip()}


@dataclass
class Project:
    """Research project offered by a teacher."""
    id: str
    title: str
    description: str = ""
    requirements: str = ""
    required_skills: List[str] = field(default_factory=list)
    research_field: str = ""
    duration: int = 0
    positions: int = 1
    status: ProjectStatus = ProjectStatus.ACTIVE
    teacher_id: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == ProjectStatus.ACTIVE


@dataclass
class ProjectRecommendation:
    """One ranked project for a student."""
    project: Project
    score: int
    reasoning: str
    matched_skills: List[str] = field(default_factory=list)
    source: str = "model"


@dataclass
class StudentMatch:
    """One ranked student for a project; the unit stored in the batch cache."""
    student_id: str
    score: int
    reasoning: str
    matched_skills: List[str] = field(default_factory=list)
    suggestions: str = ""
    source: str = "model"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudentMatch":
        return cls(
            student_id=data['student_id'],
            score=int(data['score']),
            reasoning=data.get('reasoning', ''),
            matched_skills=list(data.get('matched_skills') or []),
            suggestions=data.get('suggestions', ''),
            source=data.get('source', 'model'),
        )
