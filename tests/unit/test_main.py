"""Tests for the command line entry point."""
import json
from unittest.mock import MagicMock, patch

import pytest

import main
from core.domain import ProjectRecommendation, StudentMatch
from core.exceptions import NotFoundException
from tests.mocks.matching_mocks import make_project


@pytest.fixture
def ctx():
    ctx = MagicMock()
    ctx.engine.metrics.snapshot.return_value = {}
    with patch("main.AppContext.build", return_value=ctx), \
         patch("main.load_config") as load_config, \
         patch("main.signal.signal"):
        load_config.return_value.matching.default_student_limit = 10
        load_config.return_value.matching.default_project_limit = 20
        yield ctx


def test_recommend_prints_ranked_projects(ctx, capsys):
    ctx.engine.rank_projects_for_student.return_value = [
        ProjectRecommendation(project=make_project("p1"), score=80, reasoning="fit", matched_skills=["Python"])
    ]

    assert main.main(["recommend", "s1", "--limit", "3"]) == 0

    args, kwargs = ctx.engine.rank_projects_for_student.call_args
    assert args == ("s1", 3)
    assert kwargs["cancel_event"] is main.cancel_requested
    printed = json.loads(capsys.readouterr().out)
    assert printed[0]["project_id"] == "p1"
    assert printed[0]["score"] == 80
    ctx.close.assert_called_once()


def test_rank_uses_default_limit(ctx, capsys):
    ctx.engine.rank_students_for_project.return_value = [StudentMatch("s1", 70, "ok")]

    assert main.main(["rank", "p1"]) == 0

    assert ctx.engine.rank_students_for_project.call_args.args == ("p1", 20)
    assert json.loads(capsys.readouterr().out)[0]["student_id"] == "s1"


def test_not_found_exits_nonzero(ctx):
    ctx.engine.rank_projects_for_student.side_effect = NotFoundException("Student profile", "ghost")
    assert main.main(["recommend", "ghost"]) == 1
    ctx.close.assert_called_once()


def test_cache_commands(ctx, capsys):
    ctx.engine.cache_stats.return_value = {"score_cache": {"total_entries": 1, "expired_entries": 0}}
    assert main.main(["cache-stats"]) == 0
    assert json.loads(capsys.readouterr().out)["score_cache"]["total_entries"] == 1

    ctx.engine.clear_caches.return_value = {"score_cache": 1, "batch_cache": 0}
    assert main.main(["cache-clear"]) == 0
    ctx.engine.clear_caches.assert_called_once()


def test_init_db_creates_tables(ctx):
    with patch("main.init_db") as init_db, patch("main.create_engine") as create_engine:
        assert main.main(["init-db"]) == 0
    init_db.assert_called_once_with(create_engine.return_value)
