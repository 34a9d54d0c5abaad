#!/usr/bin/env python3
"""
Tests for the SQL-backed profile read model.
"""

from core.domain import ProjectStatus, StudentProfile, Project
from database.read_model import SqlProfileReadModel
from database.uow import profile_uow


def _seed(session_factory):
    with profile_uow(session_factory) as repo:
        repo.students.create(
            "s1",
            major="Computer Science",
            grade=3,
            gpa=3.5,
            skills=["Python"],
            research_interests=["vision"],
            academic_background=None,
        )
        repo.students.add_experience("s1", title="Robot", role="dev", duration="3 months")
        repo.projects.create(
            "t1", "Vision Lab",
            status="active",
            required_skills=["Python", "OpenCV"],
            research_field="Computer Vision",
            duration=6,
            positions=2,
        )
        repo.projects.create("t1", "Old Lab", status="completed")


class TestSqlProfileReadModel:

    def test_get_student_returns_detached_dataclass(self, session_factory):
        _seed(session_factory)
        read_model = SqlProfileReadModel(session_factory)

        student = read_model.get_student("s1")

        assert isinstance(student, StudentProfile)
        assert student.skills == ["Python"]
        assert student.academic_background == ""
        assert [e.title for e in student.project_experiences] == ["Robot"]
        assert student.project_experiences[0].achievements == ""

    def test_missing_records_are_none(self, session_factory):
        read_model = SqlProfileReadModel(session_factory)
        assert read_model.get_student("nobody") is None
        assert read_model.get_project("nothing") is None

    def test_list_active_projects(self, session_factory):
        _seed(session_factory)
        read_model = SqlProfileReadModel(session_factory)

        projects = read_model.list_active_projects()

        assert len(projects) == 1
        project = projects[0]
        assert isinstance(project, Project)
        assert project.title == "Vision Lab"
        assert project.status == ProjectStatus.ACTIVE
        assert project.required_skills == ["Python", "OpenCV"]
        assert read_model.get_project(project.id) == project

    def test_list_students(self, session_factory):
        read_model = SqlProfileReadModel(session_factory)
        assert read_model.list_students() == []

        _seed(session_factory)
        assert [s.id for s in read_model.list_students()] == ["s1"]
