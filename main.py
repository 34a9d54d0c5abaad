import argparse
import json
import logging
import os
import signal
import sys
import threading
import time

from sqlalchemy import create_engine

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import MatchingException
from database.init_db import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Set by SIGINT/SIGTERM; a running batch ranking stops and writes nothing
cancel_requested = threading.Event()


def signal_handler(sig, frame):
    logger.info("Shutdown signal received")
    cancel_requested.set()


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_recommend(ctx: AppContext, student_id: str, limit: int) -> None:
    start = time.time()
    recommendations = ctx.engine.rank_projects_for_student(
        student_id, limit, cancel_event=cancel_requested
    )
    logger.info(f"Scored projects for {student_id} in {time.time() - start:.2f}s")
    _print_json([
        {
            "project_id": r.project.id,
            "title": r.project.title,
            "score": r.score,
            "matched_skills": r.matched_skills,
            "reasoning": r.reasoning,
            "source": r.source,
        }
        for r in recommendations
    ])


def run_rank(ctx: AppContext, project_id: str, limit: int) -> None:
    start = time.time()
    matches = ctx.engine.rank_students_for_project(
        project_id, limit, cancel_event=cancel_requested
    )
    logger.info(f"Ranked students for {project_id} in {time.time() - start:.2f}s")
    _print_json([m.to_dict() for m in matches])


def run_cache_stats(ctx: AppContext) -> None:
    _print_json(ctx.engine.cache_stats())


def run_cache_clear(ctx: AppContext) -> None:
    _print_json(ctx.engine.clear_caches())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LabMatch student/project matching")
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to config.yaml (default: ./config.yaml)')
    sub = parser.add_subparsers(dest='command', required=True)

    recommend = sub.add_parser('recommend', help='Rank active projects for a student')
    recommend.add_argument('student_id')
    recommend.add_argument('--limit', type=int, default=None)

    rank = sub.add_parser('rank', help='Rank students for a project')
    rank.add_argument('project_id')
    rank.add_argument('--limit', type=int, default=None)

    sub.add_parser('cache-stats', help='Show match cache entry counts')
    sub.add_parser('cache-clear', help='Drop every cached score and batch')

    serve = sub.add_parser('serve', help='Run the web API')
    serve.add_argument('--host', type=str, default=None)
    serve.add_argument('--port', type=int, default=None)

    sub.add_parser('init-db', help='Create database tables')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    if args.command == 'serve':
        os.environ["LABMATCH_CONFIG"] = args.config
        from web.backend.app import main as serve
        serve(host=args.host, port=args.port)
        return 0

    if args.command == 'init-db':
        init_db(create_engine(config.database.url))
        return 0

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    ctx = AppContext.build(config)
    try:
        if args.command == 'recommend':
            limit = args.limit if args.limit is not None else config.matching.default_student_limit
            run_recommend(ctx, args.student_id, limit)
        elif args.command == 'rank':
            limit = args.limit if args.limit is not None else config.matching.default_project_limit
            run_rank(ctx, args.project_id, limit)
        elif args.command == 'cache-stats':
            run_cache_stats(ctx)
        elif args.command == 'cache-clear':
            run_cache_clear(ctx)
    except MatchingException as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        return 1
    finally:
        ctx.close()
        logger.info(f"Engine counters: {ctx.engine.metrics.snapshot()}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
