from .base import Base
from .student import StudentProfileRecord, ProjectExperienceRecord
from .project import ProjectRecord

__all__ = [
    'Base',
    'StudentProfileRecord',
    'ProjectExperienceRecord',
    'ProjectRecord',
]
