import uuid

from sqlalchemy import Column, Text, Integer, Float, TIMESTAMP, ForeignKey, JSON, Index, func
from sqlalchemy.orm import relationship

from .base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class StudentProfileRecord(Base):
    """
    Student profile, one per student user.

    ``user_id`` is the id the matching engine and caches key on.
    """
    __tablename__ = 'student_profile'

    user_id = Column(Text, primary_key=True)
    major = Column(Text, nullable=False)
    grade = Column(Integer, nullable=False)
    gpa = Column(Float, nullable=False)

    # Tag lists; order is kept for display, matching treats them as sets
    skills = Column(JSON, nullable=False, default=list)
    research_interests = Column(JSON, nullable=False, default=list)

    academic_background = Column(Text)
    self_introduction = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    project_experiences = relationship(
        "ProjectExperienceRecord",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="ProjectExperienceRecord.position"
    )


class ProjectExperienceRecord(Base):
    """A past project listed on a student profile."""
    __tablename__ = 'project_experience'

    id = Column(Text, primary_key=True, default=_new_id)
    student_id = Column(Text, ForeignKey('student_profile.user_id', ondelete='CASCADE'), nullable=False)

    title = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    duration = Column(Text, nullable=False)
    achievements = Column(Text)
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    student = relationship("StudentProfileRecord", back_populates="project_experiences")

    __table_args__ = (
        Index('idx_project_experience_student', 'student_id'),
    )
