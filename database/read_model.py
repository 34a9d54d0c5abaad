"""SQL-backed profile read model for the matching engine."""
import logging
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from core.domain import StudentProfile, ProjectExperience, Project, ProjectStatus
from core.matching.read_model import ProfileReadModel
from database.models import StudentProfileRecord, ProjectRecord
from database.uow import profile_uow

logger = logging.getLogger(__name__)


def student_from_record(record: StudentProfileRecord) -> StudentProfile:
    return StudentProfile(
        id=record.user_id,
        major=record.major,
        grade=int(record.grade),
        gpa=float(record.gpa),
        skills=list(record.skills or []),
        research_interests=list(record.research_interests or []),
        academic_background=record.academic_background or "",
        self_introduction=record.self_introduction or "",
        project_experiences=[
            ProjectExperience(
                id=exp.id,
                title=exp.title,
                role=exp.role,
                duration=exp.duration,
                achievements=exp.achievements or "",
            )
            for exp in record.project_experiences
        ],
    )


def project_from_record(record: ProjectRecord) -> Project:
    return Project(
        id=record.id,
        title=record.title,
        description=record.description or "",
        requirements=record.requirements or "",
        required_skills=list(record.required_skills or []),
        research_field=record.research_field or "",
        duration=int(record.duration or 0),
        positions=int(record.positions or 1),
        status=ProjectStatus(record.status),
        teacher_id=record.teacher_id,
    )


class SqlProfileReadModel(ProfileReadModel):
    """Reads students and projects in short read-only units of work.

    Records are converted to detached dataclasses before the session closes.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def get_student(self, student_id: str) -> Optional[StudentProfile]:
        with profile_uow(self.session_factory) as repo:
            record = repo.students.get(student_id)
            return student_from_record(record) if record else None

    def get_project(self, project_id: str) -> Optional[Project]:
        with profile_uow(self.session_factory) as repo:
            record = repo.projects.get(project_id)
            return project_from_record(record) if record else None

    def list_active_projects(self) -> List[Project]:
        with profile_uow(self.session_factory) as repo:
            return [project_from_record(r) for r in repo.projects.list_active()]

    def list_students(self) -> List[StudentProfile]:
        with profile_uow(self.session_factory) as repo:
            students = [student_from_record(r) for r in repo.students.list_all()]
        logger.debug(f"Loaded {len(students)} student profiles")
        return students
