#!/usr/bin/env python3
"""
Profile Service - student profile and project mutations.

Every mutation commits first and then invalidates the match caches before
returning, so a teacher never sees matched skills computed from a profile
that no longer exists. A mutation that skips invalidation is a bug.
"""

import logging
from typing import Any, Callable, ContextManager, Dict

from core.domain import StudentProfile, Project
from core.matching.engine import MatchingEngine
from database.read_model import student_from_record, project_from_record
from database.repository import ProfileRepository

logger = logging.getLogger(__name__)

UnitOfWork = Callable[[], ContextManager[ProfileRepository]]


class ProfileService:
    """Applies profile/project changes and notifies the matching caches."""

    def __init__(self, uow: UnitOfWork, engine: MatchingEngine):
        self.uow = uow
        self.engine = engine

    # ---------------------------- students ----------------------------

    def create_profile(self, user_id: str, **fields: Any) -> StudentProfile:
        with self.uow() as repo:
            record = repo.students.create(user_id, **fields)
            profile = student_from_record(record)
        self.engine.invalidate_student(user_id)
        logger.info(f"Created profile for student {user_id}")
        return profile

    def update_profile(self, user_id: str, **fields: Any) -> StudentProfile:
        with self.uow() as repo:
            record = repo.students.update(user_id, **fields)
            profile = student_from_record(record)
        self.engine.invalidate_student(user_id)
        logger.info(f"Updated profile for student {user_id}: {sorted(fields)}")
        return profile

    def add_experience(self, user_id: str, **fields: Any) -> Dict[str, Any]:
        with self.uow() as repo:
            record = repo.students.add_experience(user_id, **fields)
            experience_id = record.id
        self.engine.invalidate_student(user_id)
        return {"id": experience_id, "student_id": user_id, **fields}

    def update_experience(self, experience_id: str, **fields: Any) -> Dict[str, Any]:
        with self.uow() as repo:
            record = repo.students.update_experience(experience_id, **fields)
            student_id = record.student_id
        self.engine.invalidate_student(student_id)
        return {"id": experience_id, "student_id": student_id, **fields}

    def delete_experience(self, experience_id: str) -> str:
        with self.uow() as repo:
            student_id = repo.students.delete_experience(experience_id)
        self.engine.invalidate_student(student_id)
        return student_id

    # ---------------------------- projects ----------------------------

    def update_project(self, project_id: str, **fields: Any) -> Project:
        with self.uow() as repo:
            record = repo.projects.update(project_id, **fields)
            project = project_from_record(record)
        self.engine.invalidate_project(project_id)
        logger.info(f"Updated project {project_id}: {sorted(fields)}")
        return project

    def set_project_status(self, project_id: str, status: str) -> Project:
        with self.uow() as repo:
            record = repo.projects.set_status(project_id, status)
            project = project_from_record(record)
        self.engine.invalidate_project(project_id)
        logger.info(f"Project {project_id} is now {project.status.value}")
        return project
