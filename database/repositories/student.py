import logging
from typing import List, Optional, Dict, Any

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from core.exceptions import InvalidRequestException, NotFoundException
from database.models import StudentProfileRecord, ProjectExperienceRecord
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {
    'major', 'grade', 'gpa', 'skills', 'research_interests',
    'academic_background', 'self_introduction',
}
EXPERIENCE_FIELDS = {'title', 'role', 'duration', 'achievements'}


def _check_fields(fields: Dict[str, Any], allowed: set) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise InvalidRequestException(f"Unknown fields: {', '.join(sorted(unknown))}")


class StudentRepository(BaseRepository):
    def get(self, user_id: str) -> Optional[StudentProfileRecord]:
        stmt = (
            select(StudentProfileRecord)
            .options(selectinload(StudentProfileRecord.project_experiences))
            .where(StudentProfileRecord.user_id == user_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def require(self, user_id: str) -> StudentProfileRecord:
        record = self.get(user_id)
        if record is None:
            raise NotFoundException("Student profile", user_id)
        return record

    def list_all(self) -> List[StudentProfileRecord]:
        stmt = (
            select(StudentProfileRecord)
            .options(selectinload(StudentProfileRecord.project_experiences))
            .order_by(StudentProfileRecord.created_at, StudentProfileRecord.user_id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(self, user_id: str, **fields: Any) -> StudentProfileRecord:
        _check_fields(fields, PROFILE_FIELDS)
        record = StudentProfileRecord(user_id=user_id, **fields)
        self.db.add(record)
        self.db.flush()
        return record

    def update(self, user_id: str, **fields: Any) -> StudentProfileRecord:
        _check_fields(fields, PROFILE_FIELDS)
        record = self.require(user_id)
        for name, value in fields.items():
            setattr(record, name, value)
        self.db.flush()
        return record

    def add_experience(self, student_id: str, **fields: Any) -> ProjectExperienceRecord:
        _check_fields(fields, EXPERIENCE_FIELDS)
        self.require(student_id)

        next_position = self.db.execute(
            select(func.coalesce(func.max(ProjectExperienceRecord.position), -1) + 1)
            .where(ProjectExperienceRecord.student_id == student_id)
        ).scalar_one()

        record = ProjectExperienceRecord(student_id=student_id, position=next_position, **fields)
        self.db.add(record)
        self.db.flush()
        return record

    def get_experience(self, experience_id: str) -> Optional[ProjectExperienceRecord]:
        stmt = select(ProjectExperienceRecord).where(ProjectExperienceRecord.id == experience_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def update_experience(self, experience_id: str, **fields: Any) -> ProjectExperienceRecord:
        _check_fields(fields, EXPERIENCE_FIELDS)
        record = self.get_experience(experience_id)
        if record is None:
            raise NotFoundException("Project experience", experience_id)
        for name, value in fields.items():
            setattr(record, name, value)
        self.db.flush()
        return record

    def delete_experience(self, experience_id: str) -> str:
        """Delete an experience record and return the owning student's id."""
        record = self.get_experience(experience_id)
        if record is None:
            raise NotFoundException("Project experience", experience_id)
        student_id = record.student_id
        self.db.delete(record)
        self.db.flush()
        return student_id
