"""
Profile read model - where the engine gets students and projects from.

``None`` means "not found"; an empty list means "nothing there". The engine
relies on that distinction to raise NotFoundException only for unknown ids.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from core.domain import StudentProfile, Project


class ProfileReadModel(ABC):

    @abstractmethod
    def get_student(self, student_id: str) -> Optional[StudentProfile]:
        """Student profile with its project experiences, or None."""
        pass

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    def list_active_projects(self) -> List[Project]:
        """All projects with status active, in a stable listing order."""
        pass

    @abstractmethod
    def list_students(self) -> List[StudentProfile]:
        """All student profiles with their project experiences."""
        pass
