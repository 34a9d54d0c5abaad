import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///labmatch.db")

engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def build_session_factory(url: str, **engine_kwargs) -> sessionmaker:
    """Create a session factory for an explicit database URL."""
    bound_engine = create_engine(url, **engine_kwargs)
    return sessionmaker(autocommit=False, autoflush=False, bind=bound_engine)
