from sqlalchemy.orm import Session

from database.repositories import StudentRepository, ProjectRepository


class ProfileRepository:
    """Entry point to the student and project repositories sharing one session."""

    def __init__(self, db: Session):
        self.db = db
        self.students = StudentRepository(db)
        self.projects = ProjectRepository(db)
