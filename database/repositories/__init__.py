from database.repositories.base import BaseRepository
from database.repositories.student import StudentRepository
from database.repositories.project import ProjectRepository

__all__ = [
    'BaseRepository',
    'StudentRepository',
    'ProjectRepository',
]
