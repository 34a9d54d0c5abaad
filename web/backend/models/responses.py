#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict


class ProjectSummary(BaseModel):
    """Project fields shown next to a recommendation."""
    project_id: str
    title: str
    research_field: str
    required_skills: List[str]
    duration: int
    positions: int
    teacher_id: str


class ProjectRecommendationItem(BaseModel):
    """One ranked project for a student."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "project": {
                    "project_id": "proj-42",
                    "title": "Graph Neural Networks for Molecule Design",
                    "research_field": "Machine Learning",
                    "required_skills": ["Python", "PyTorch"],
                    "duration": 6,
                    "positions": 2,
                    "teacher_id": "t-7"
                },
                "score": 78,
                "reasoning": "Strong Python background and ML coursework.",
                "matched_skills": ["Python"],
                "source": "model"
            }
        }
    )

    project: ProjectSummary
    score: int = Field(ge=0, le=100)
    reasoning: str
    matched_skills: List[str]
    source: str


class RecommendationsResponse(BaseModel):
    """Response for student-side recommendations."""
    success: bool
    student_id: str
    count: int
    recommendations: List[ProjectRecommendationItem]


class StudentMatchItem(BaseModel):
    """One ranked student for a project."""
    student_id: str
    score: int = Field(ge=0, le=100)
    reasoning: str
    matched_skills: List[str]
    suggestions: str
    source: str


class StudentMatchesResponse(BaseModel):
    """Response for project-side candidate ranking."""
    success: bool
    project_id: str
    count: int
    matches: List[StudentMatchItem]


class CacheStatsResponse(BaseModel):
    """Entry counts for both match caches plus engine counters."""
    success: bool
    score_cache: Dict[str, int]
    batch_cache: Dict[str, int]
    metrics: Dict[str, int]


class CacheClearResponse(BaseModel):
    """Number of entries removed from each cache."""
    success: bool
    message: str
    score_cache: int
    batch_cache: int


class StudentProfileResponse(BaseModel):
    """Student profile as stored after a change."""
    success: bool
    student_id: str
    major: str
    grade: int
    gpa: float
    skills: List[str]
    research_interests: List[str]
    experience_count: int


class ExperienceResponse(BaseModel):
    success: bool
    experience_id: str
    student_id: str


class ProjectResponse(BaseModel):
    """Project as stored after a change."""
    success: bool
    project: ProjectSummary
    status: str
