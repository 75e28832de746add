"""Engine and sessions for the local document store: SQLite in development, any SQLAlchemy URL otherwise."""
from collections.abc import Generator
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from utils.config import DATABASE_URL

DEV_DATABASE_FILE = "slipways.db"


def _check_test_url(url: str) -> None:
    """Under TESTING=true refuse any URL that could be the development document store."""
    if os.environ.get("TESTING") != "true":
        return
    target = url.lower().split("?")[0]
    if DEV_DATABASE_FILE in target or (":memory:" not in target and "test" not in target):
        raise RuntimeError(
            f"TESTING=true but DATABASE_URL points at {url!r}. "
            "Set TESTING_DATABASE_URL to sqlite:///:memory: or a URL containing 'test'."
        )


def _make_engine(url: str) -> Engine:
    options: dict = {"echo": False}
    if url.startswith("sqlite"):
        # Requests and background threads share connections.
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            # One connection, so every session sees the same in-memory tables.
            options["poolclass"] = StaticPool
    return create_engine(url, **options)


_check_test_url(DATABASE_URL)
engine = _make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
