from sqlalchemy import create_engine, inspect

from database.init_db import init_db


def test_init_db_creates_profile_tables():
    engine = create_engine("sqlite://")

    init_db(engine)

    tables = set(inspect(engine).get_table_names())
    assert {"student_profile", "project_experience", "project"} <= tables


def test_init_db_is_idempotent():
    engine = create_engine("sqlite://")
    init_db(engine)
    init_db(engine)
    assert "project" in inspect(engine).get_table_names()
