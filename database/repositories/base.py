from sqlalchemy.orm import Session


class BaseRepository:
    """Repositories share the caller's session; the unit of work commits."""

    def __init__(self, db: Session):
        self.db = db
