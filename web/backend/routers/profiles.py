#!/usr/bin/env python3
"""
Profile endpoints - edit student profiles, their project experience and
research projects.

Every change goes through ProfileService, which drops the affected match
cache entries before the response is sent.
"""

import logging

from fastapi import APIRouter, Depends

from core.domain import StudentProfile, Project
from core.profile_service import ProfileService
from ..dependencies import get_profile_service
from ..models.requests import (
    StudentProfileCreate,
    StudentProfileUpdate,
    ExperienceCreate,
    ExperienceUpdate,
    ProjectUpdate,
    ProjectStatusUpdate,
)
from ..models.responses import (
    StudentProfileResponse,
    ExperienceResponse,
    ProjectResponse,
)
from .matching import to_project_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


def _profile_response(profile: StudentProfile) -> StudentProfileResponse:
    return StudentProfileResponse(
        success=True,
        student_id=profile.id,
        major=profile.major,
        grade=profile.grade,
        gpa=profile.gpa,
        skills=profile.skills,
        research_interests=profile.research_interests,
        experience_count=len(profile.project_experiences)
    )


def _project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        success=True,
        project=to_project_summary(project),
        status=project.status.value
    )


@router.post("/students", response_model=StudentProfileResponse, status_code=201)
def create_student_profile(
    body: StudentProfileCreate,
    service: ProfileService = Depends(get_profile_service)
):
    fields = body.model_dump(exclude={"user_id"}, exclude_none=True)
    return _profile_response(service.create_profile(body.user_id, **fields))


@router.put("/students/{student_id}", response_model=StudentProfileResponse)
def update_student_profile(
    student_id: str,
    body: StudentProfileUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    """
    Update a student profile.

    Only fields present in the body change. Cached scores and ranked lists
    involving the student are dropped.
    """
    fields = body.model_dump(exclude_unset=True)
    return _profile_response(service.update_profile(student_id, **fields))


@router.post("/students/{student_id}/experiences", response_model=ExperienceResponse, status_code=201)
def add_experience(
    student_id: str,
    body: ExperienceCreate,
    service: ProfileService = Depends(get_profile_service)
):
    result = service.add_experience(student_id, **body.model_dump(exclude_none=True))
    return ExperienceResponse(success=True, experience_id=result["id"], student_id=student_id)


@router.put("/experiences/{experience_id}", response_model=ExperienceResponse)
def update_experience(
    experience_id: str,
    body: ExperienceUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    result = service.update_experience(experience_id, **body.model_dump(exclude_unset=True))
    return ExperienceResponse(success=True, experience_id=experience_id, student_id=result["student_id"])


@router.delete("/experiences/{experience_id}", response_model=ExperienceResponse)
def delete_experience(
    experience_id: str,
    service: ProfileService = Depends(get_profile_service)
):
    student_id = service.delete_experience(experience_id)
    return ExperienceResponse(success=True, experience_id=experience_id, student_id=student_id)


@router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    body: ProjectUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    """
    Update a research project.

    Cached scores for the project and its ranked student list are dropped.
    """
    return _project_response(service.update_project(project_id, **body.model_dump(exclude_unset=True)))


@router.put("/projects/{project_id}/status", response_model=ProjectResponse)
def set_project_status(
    project_id: str,
    body: ProjectStatusUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    """Move a project between draft, active, closed and completed."""
    return _project_response(service.set_project_status(project_id, body.status))
