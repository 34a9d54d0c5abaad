import contextlib
import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from database.database import SessionLocal
from database.repository import ProfileRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def profile_uow(session_factory: Optional[sessionmaker] = None):
    """Per-unit-of-work transaction scope.

    Yields a ProfileRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with profile_uow() as repo:
            student = repo.students.get(user_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = (session_factory or SessionLocal)()
    try:
        repo = ProfileRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
