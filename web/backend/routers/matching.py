#!/usr/bin/env python3
"""
Matching endpoints - ranked projects for a student and ranked students for a project.

Ranking runs on the threadpool while the request watches for the client
going away; a disconnect cancels the batch's outstanding scoring tasks.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.concurrency import run_in_threadpool

from core.domain import Project
from core.matching.engine import MatchingEngine
from ..dependencies import get_engine
from ..models.responses import (
    RecommendationsResponse,
    ProjectRecommendationItem,
    ProjectSummary,
    StudentMatchesResponse,
    StudentMatchItem,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matching", tags=["matching"])

# How often a running batch checks whether its client is still connected
DISCONNECT_POLL_SECONDS = 0.1


async def run_cancellable(request: Request, rank: Callable[..., Any], *args: Any) -> Any:
    """Run ``rank(*args, cancel_event=...)`` on the threadpool, cancelling on disconnect."""
    cancel_event = threading.Event()
    task = asyncio.ensure_future(run_in_threadpool(rank, *args, cancel_event=cancel_event))
    try:
        while not task.done():
            if await request.is_disconnected():
                logger.info(f"Client left {request.url.path}; cancelling batch")
                cancel_event.set()
                break
            await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
        return await task
    except asyncio.CancelledError:
        cancel_event.set()
        raise


def to_project_summary(project: Project) -> ProjectSummary:
    return ProjectSummary(
        project_id=project.id,
        title=project.title,
        research_field=project.research_field,
        required_skills=project.required_skills,
        duration=project.duration,
        positions=project.positions,
        teacher_id=project.teacher_id
    )


@router.get("/students/{student_id}/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    request: Request,
    student_id: str,
    limit: Optional[int] = Query(default=None, description="Maximum projects to return (>= 1)"),
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Get the best-matching active projects for a student.

    Scores come from the model when it is reachable and from the keyword
    fallback otherwise; ``source`` tells which.
    """
    effective_limit = limit if limit is not None else engine.config.default_student_limit
    recommendations = await run_cancellable(
        request, engine.rank_projects_for_student, student_id, effective_limit
    )

    items = [
        ProjectRecommendationItem(
            project=to_project_summary(r.project),
            score=r.score,
            reasoning=r.reasoning,
            matched_skills=r.matched_skills,
            source=r.source
        )
        for r in recommendations
    ]

    return RecommendationsResponse(
        success=True,
        student_id=student_id,
        count=len(items),
        recommendations=items
    )


@router.get("/projects/{project_id}/students", response_model=StudentMatchesResponse)
async def get_project_students(
    request: Request,
    project_id: str,
    limit: Optional[int] = Query(default=None, description="Maximum students to return (>= 1)"),
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Get the best-matching students for a project.

    The full ranked list is cached per project, so repeated calls with
    different limits are served without rescoring.
    """
    effective_limit = limit if limit is not None else engine.config.default_project_limit
    matches = await run_cancellable(
        request, engine.rank_students_for_project, project_id, effective_limit
    )

    return StudentMatchesResponse(
        success=True,
        project_id=project_id,
        count=len(matches),
        matches=[StudentMatchItem(**m.to_dict()) for m in matches]
    )
