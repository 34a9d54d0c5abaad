import logging
from typing import List, Optional, Any

from sqlalchemy import select

from core.domain import ProjectStatus
from core.exceptions import InvalidRequestException, NotFoundException
from database.models import ProjectRecord
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

PROJECT_FIELDS = {
    'title', 'description', 'requirements', 'required_skills',
    'research_field', 'duration', 'positions',
}


class ProjectRepository(BaseRepository):
    def get(self, project_id: str) -> Optional[ProjectRecord]:
        stmt = select(ProjectRecord).where(ProjectRecord.id == project_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def require(self, project_id: str) -> ProjectRecord:
        record = self.get(project_id)
        if record is None:
            raise NotFoundException("Project", project_id)
        return record

    def list_active(self) -> List[ProjectRecord]:
        stmt = (
            select(ProjectRecord)
            .where(ProjectRecord.status == ProjectStatus.ACTIVE.value)
            .order_by(ProjectRecord.created_at, ProjectRecord.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(self, teacher_id: str, title: str, status: str = ProjectStatus.DRAFT.value, **fields: Any) -> ProjectRecord:
        unknown = set(fields) - PROJECT_FIELDS
        if unknown:
            raise InvalidRequestException(f"Unknown fields: {', '.join(sorted(unknown))}")
        record = ProjectRecord(
            teacher_id=teacher_id,
            title=title,
            status=ProjectStatus(status).value,
            **fields
        )
        self.db.add(record)
        self.db.flush()
        return record

    def update(self, project_id: str, **fields: Any) -> ProjectRecord:
        unknown = set(fields) - PROJECT_FIELDS
        if unknown:
            raise InvalidRequestException(f"Unknown fields: {', '.join(sorted(unknown))}")
        record = self.require(project_id)
        for name, value in fields.items():
            setattr(record, name, value)
        self.db.flush()
        return record

    def set_status(self, project_id: str, status: str) -> ProjectRecord:
        try:
            new_status = ProjectStatus(status)
        except ValueError:
            raise InvalidRequestException(f"Unknown project status: {status}")
        record = self.require(project_id)
        record.status = new_status.value
        self.db.flush()
        return record
