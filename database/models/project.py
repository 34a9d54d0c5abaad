import uuid

from sqlalchemy import Column, Text, Integer, TIMESTAMP, JSON, Index, func

from .base import Base


class ProjectRecord(Base):
    """
    Research project published by a teacher.

    Only projects with status 'active' are offered to students for matching.
    """
    __tablename__ = 'project'

    id = Column(Text, primary_key=True, default=lambda: str(uuid.uuid4()))
    teacher_id = Column(Text, nullable=False)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    requirements = Column(Text, nullable=False, default="")
    required_skills = Column(JSON, nullable=False, default=list)
    research_field = Column(Text, nullable=False, default="")
    duration = Column(Integer, nullable=False, default=0)  # months
    positions = Column(Integer, nullable=False, default=1)

    status = Column(Text, nullable=False, default='draft')  # draft|active|closed|completed

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_project_status', 'status'),
        Index('idx_project_teacher', 'teacher_id'),
    )
