#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class StudentProfileCreate(BaseModel):
    """Request to create a student profile."""
    user_id: str = Field(..., min_length=1, description="Id of the owning user")
    major: str
    grade: int = Field(ge=1, description="Year of study")
    gpa: float = Field(ge=0, le=4.0)
    skills: List[str] = Field(default_factory=list)
    research_interests: List[str] = Field(default_factory=list)
    academic_background: Optional[str] = None
    self_introduction: Optional[str] = None


class StudentProfileUpdate(BaseModel):
    """Partial profile update. Only fields present in the body are changed."""
    major: Optional[str] = None
    grade: Optional[int] = Field(None, ge=1)
    gpa: Optional[float] = Field(None, ge=0, le=4.0)
    skills: Optional[List[str]] = None
    research_interests: Optional[List[str]] = None
    academic_background: Optional[str] = None
    self_introduction: Optional[str] = None


class ExperienceCreate(BaseModel):
    """A project experience to append to a student profile."""
    title: str
    role: str
    duration: str
    achievements: Optional[str] = None


class ExperienceUpdate(BaseModel):
    title: Optional[str] = None
    role: Optional[str] = None
    duration: Optional[str] = None
    achievements: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Partial project update. Only fields present in the body are changed."""
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    required_skills: Optional[List[str]] = None
    research_field: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0, description="Duration in months")
    positions: Optional[int] = Field(None, ge=1)


class ProjectStatusUpdate(BaseModel):
    status: str = Field(..., description="draft, active, closed or completed")
