#!/usr/bin/env python3
"""
Matching Engine - cache-aside pair scoring and ranked matching.

Scores a (student, project) pair with the model scorer, falling back to the
keyword scorer on any model failure, and memoizes the result in the score
cache. Batch ranking fans one scoring task per counterpart out over a
bounded worker pool, waits for all of them, and sorts.

Guarantees:
- Scoring never fails because of the model; the worst case is a
  fallback-sourced score.
- Remote model calls are bounded by ``max_concurrency`` and each task has
  its own timeout, so a batch takes at most about
  timeout * ceil(N / max_concurrency).
- Ranked order is deterministic for deterministic scores: results land in
  an index-addressed list and the sort is stable.
- A cancelled batch is never written to the batch cache.
- A profile change committed while a batch is running keeps that batch's
  scores out of both caches: write tokens are taken before profiles are read.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, Future, wait, FIRST_COMPLETED
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import List, Optional, Tuple, Dict, Any

from tenacity import (
    Retrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from core.cache.batch_cache import BatchMatchCache
from core.cache.score_cache import ScoreCache, WriteToken
from core.config_loader import MatchingConfig
from core.domain import StudentProfile, Project, ProjectRecommendation, StudentMatch
from core.exceptions import (
    InvalidRequestException,
    MatchingCancelledException,
    ModelUnavailableException,
    NotFoundException,
)
from core.matching import metrics as m
from core.matching.metrics import EngineMetrics
from core.matching.read_model import ProfileReadModel
from core.matching.singleflight import SingleFlight
from core.scorer.fallback import FallbackScorer
from core.scorer.model_scorer import ModelScorer
from core.scorer.models import MatchScore

logger = logging.getLogger(__name__)

# How often a waiting batch checks its cancellation event
CANCEL_POLL_SECONDS = 0.05


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, ModelUnavailableException) and exc.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception()
    wait_s = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Transient scoring model error (attempt %s). Waiting %.1fs before retry. Details: %s",
        retry_state.attempt_number, wait_s, exc,
    )


def validate_id(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestException(f"{name} must be a non-empty string")
    if ":" in value:
        raise InvalidRequestException(f"{name} must not contain ':'")
    return value


def validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidRequestException(f"limit must be an integer >= 1, got {limit!r}")
    return limit


class MatchingEngine:
    """
    Student/project matching with a model-backed scorer, a deterministic
    fallback, and two caches.

    Construct once per process and share it; it owns two thread pools,
    released by close().
    """

    def __init__(
        self,
        read_model: ProfileReadModel,
        score_cache: ScoreCache,
        batch_cache: BatchMatchCache,
        model_scorer: ModelScorer,
        fallback_scorer: Optional[FallbackScorer] = None,
        config: Optional[MatchingConfig] = None
    ):
        self.read_model = read_model
        self.score_cache = score_cache
        self.batch_cache = batch_cache
        self.model_scorer = model_scorer
        self.fallback_scorer = fallback_scorer or FallbackScorer()
        self.config = config or MatchingConfig()
        self.metrics = EngineMetrics()

        self._flights = SingleFlight()
        self._fanout_pool = ThreadPoolExecutor(
            max_workers=self.config.max_concurrency,
            thread_name_prefix="match-fanout"
        )
        # Model calls run here so each can be abandoned at its timeout
        self._model_pool = ThreadPoolExecutor(
            max_workers=self.config.max_concurrency,
            thread_name_prefix="match-model"
        )

    # ------------------------------------------------------------------
    # Pair scoring
    # ------------------------------------------------------------------

    def score_pair(
        self,
        student: StudentProfile,
        project: Project,
        token: Optional[WriteToken] = None
    ) -> MatchScore:
        """Cache-aside score for one pair. Never raises for model failures.

        ``token`` is the score-cache write token taken before ``student`` and
        ``project`` were loaded. Without one the profiles are assumed current.
        """
        validate_id(student.id, "student_id")
        validate_id(project.id, "project_id")

        cached = self.score_cache.get(student.id, project.id)
        if cached is not None:
            self.metrics.incr(m.SCORE_CACHE_HITS)
            logger.debug(f"Cache hit for student {student.id} and project {project.id}")
            return cached

        self.metrics.incr(m.SCORE_CACHE_MISSES)
        if token is None:
            token = self.score_cache.write_token()

        if not self.config.singleflight_enabled:
            return self._compute_and_store(student, project, token)

        score, shared = self._flights.do(
            (student.id, project.id, token),
            lambda: self._compute_and_store(student, project, token)
        )
        if shared:
            self.metrics.incr(m.SINGLEFLIGHT_JOINS)
        return score

    def _compute_and_store(self, student: StudentProfile, project: Project, token: WriteToken) -> MatchScore:
        score = self._compute(student, project)
        self.score_cache.put(student.id, project.id, score, token=token)
        return score

    def _compute(self, student: StudentProfile, project: Project) -> MatchScore:
        try:
            score = self._score_with_model(student, project)
            self.metrics.incr(m.MODEL_SCORES)
            return score
        except ModelUnavailableException as e:
            logger.warning(
                f"Model scoring failed for student {student.id} / project {project.id}, "
                f"using fallback: {e}"
            )
            self.metrics.incr(m.FALLBACK_SCORES)
            return self.fallback_scorer.score(student, project)

    def _score_with_model(self, student: StudentProfile, project: Project) -> MatchScore:
        """Model call with transient-error retries, all inside one task deadline."""
        timeout = self.config.task_timeout_seconds
        deadline = time.monotonic() + timeout

        retryer = Retrying(
            retry=retry_if_exception(_is_transient),
            wait=wait_exponential(
                multiplier=self.config.retry_initial_wait_seconds,
                max=self.config.retry_max_wait_seconds
            ),
            stop=stop_after_attempt(self.config.model_max_attempts) | stop_after_delay(timeout),
            before_sleep=_log_retry,
            reraise=True,
        )
        return retryer(self._call_model_once, student, project, deadline)

    def _call_model_once(self, student: StudentProfile, project: Project, deadline: float) -> MatchScore:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ModelUnavailableException("Scoring task deadline exceeded")

        future = self._model_pool.submit(self.model_scorer.score, student, project)
        try:
            return future.result(timeout=remaining)
        except FutureTimeoutError:
            # A running call cannot be interrupted; its result is discarded.
            future.cancel()
            self.metrics.incr(m.MODEL_TIMEOUTS)
            raise ModelUnavailableException(
                f"Scoring model timed out after {self.config.task_timeout_seconds}s"
            )
        except ModelUnavailableException:
            raise
        except Exception as e:
            raise ModelUnavailableException(f"Scoring model raised {e.__class__.__name__}: {e}") from e

    # ------------------------------------------------------------------
    # Batch ranking
    # ------------------------------------------------------------------

    def rank_projects_for_student(
        self,
        student_id: str,
        limit: int = 10,
        cancel_event: Optional[threading.Event] = None
    ) -> List[ProjectRecommendation]:
        """Top ``limit`` active projects for a student, best first.

        Raises:
            InvalidRequestException: Malformed id or limit.
            NotFoundException: Unknown student.
            MatchingCancelledException: cancel_event was set before completion.
        """
        validate_id(student_id, "student_id")
        validate_limit(limit)

        # Taken before any profile is read, so an update landing mid-batch
        # rejects this batch's cache writes
        score_token = self.score_cache.write_token()

        student = self.read_model.get_student(student_id)
        if student is None:
            raise NotFoundException("Student profile", student_id)

        projects = [p for p in self.read_model.list_active_projects() if p.is_active]
        if not projects:
            return []

        scores = self._fan_out([(student, p) for p in projects], score_token, cancel_event)

        recommendations = [
            ProjectRecommendation(
                project=project,
                score=score.overall,
                reasoning=score.reasoning,
                matched_skills=list(score.matched_skills),
                source=score.source.value,
            )
            for project, score in zip(projects, scores)
        ]
        # sort() is stable, so equal scores keep listing order
        recommendations.sort(key=lambda r: r.score, reverse=True)

        logger.info(f"Ranked {len(recommendations)} projects for student {student_id}")
        return recommendations[:limit]

    def rank_students_for_project(
        self,
        project_id: str,
        limit: int = 20,
        cancel_event: Optional[threading.Event] = None
    ) -> List[StudentMatch]:
        """Top ``limit`` students for a project, best first.

        The full ranked list is cached; truncation happens on read so a
        later caller asking for more still sees every candidate.
        """
        validate_id(project_id, "project_id")
        validate_limit(limit)

        cached = self.batch_cache.get(project_id)
        if cached is not None:
            self.metrics.incr(m.BATCH_CACHE_HITS)
            logger.debug(f"Cache hit for project matches: {project_id}")
            return cached[:limit]

        self.metrics.incr(m.BATCH_CACHE_MISSES)
        token = self.batch_cache.write_token(project_id)
        score_token = self.score_cache.write_token()

        project = self.read_model.get_project(project_id)
        if project is None:
            raise NotFoundException("Project", project_id)

        students = self.read_model.list_students()
        if not students:
            # Not cached: an empty result would hide students added later
            return []

        scores = self._fan_out([(s, project) for s in students], score_token, cancel_event)

        matches = [
            StudentMatch(
                student_id=student.id,
                score=score.overall,
                reasoning=score.reasoning,
                matched_skills=list(score.matched_skills),
                suggestions=score.suggestions,
                source=score.source.value,
            )
            for student, score in zip(students, scores)
        ]
        matches.sort(key=lambda r: r.score, reverse=True)

        self.batch_cache.put(project_id, matches, token=token)
        logger.info(f"Ranked {len(matches)} students for project {project_id}")
        return matches[:limit]

    def _score_task(
        self,
        student: StudentProfile,
        project: Project,
        token: WriteToken,
        cancel_event: Optional[threading.Event]
    ) -> MatchScore:
        if cancel_event is not None and cancel_event.is_set():
            raise MatchingCancelledException("Batch cancelled")
        return self.score_pair(student, project, token)

    def _fan_out(
        self,
        pairs: List[Tuple[StudentProfile, Project]],
        token: WriteToken,
        cancel_event: Optional[threading.Event] = None
    ) -> List[MatchScore]:
        """Score every pair on the bounded pool; results keep input order."""
        results: List[Optional[MatchScore]] = [None] * len(pairs)
        futures: Dict[Future, int] = {
            self._fanout_pool.submit(self._score_task, student, project, token, cancel_event): index
            for index, (student, project) in enumerate(pairs)
        }

        pending = set(futures)
        try:
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    raise MatchingCancelledException(
                        f"Batch cancelled with {len(pending)} of {len(pairs)} scores outstanding"
                    )
                done, pending = wait(
                    pending,
                    timeout=CANCEL_POLL_SECONDS if cancel_event is not None else None,
                    return_when=FIRST_COMPLETED
                )
                for future in done:
                    results[futures[future]] = future.result()
        except BaseException as e:
            for future in pending:
                future.cancel()
            if isinstance(e, MatchingCancelledException):
                self.metrics.incr(m.BATCHES_CANCELLED)
                logger.info("Batch ranking cancelled; discarding partial results")
            raise

        return results

    # ------------------------------------------------------------------
    # Invalidation and administration
    # ------------------------------------------------------------------

    def invalidate_student(self, student_id: str) -> None:
        """Drop every cached score and batch that may reflect this student's old profile."""
        validate_id(student_id, "student_id")
        try:
            self.score_cache.invalidate_by_student(student_id)
        finally:
            self.batch_cache.invalidate_by_student(student_id)

    def invalidate_project(self, project_id: str) -> None:
        """Drop cached scores and the ranked batch for this project."""
        validate_id(project_id, "project_id")
        try:
            self.score_cache.invalidate_by_project(project_id)
        finally:
            self.batch_cache.invalidate(project_id)

    def cache_stats(self) -> Dict[str, Dict[str, int]]:
        return {
            "score_cache": self.score_cache.stats(),
            "batch_cache": self.batch_cache.stats(),
        }

    def clear_caches(self) -> Dict[str, int]:
        return {
            "score_cache": self.score_cache.clear_all(),
            "batch_cache": self.batch_cache.clear_all(),
        }

    def close(self) -> None:
        self._fanout_pool.shutdown(wait=False, cancel_futures=True)
        self._model_pool.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "MatchingEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
