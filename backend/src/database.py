"""Engine and sessions for the TokenLens database.

PostgreSQL in deployment; tests point DATABASE_URL at SQLite, which takes no
pool sizing arguments.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from config import get_settings

DATABASE_URL = get_settings().DATABASE_URL


def _engine_options(url: str) -> dict:
    options = {"pool_pre_ping": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=5, max_overflow=10)
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session for scripts: committed when the block exits cleanly, rolled back otherwise."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    # Request-scoped session; handlers commit explicitly
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
