import logging
import os
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from eduforge.core.config import settings

logger = logging.getLogger(__name__)

# The test suite builds its own engines; never touch a real file from pytest.
DATABASE_URL = (
    "sqlite:///:memory:" if os.getenv("PYTEST_RUN") == "1" else settings.SQLALCHEMY_DATABASE_URL
)
is_sqlite = DATABASE_URL.startswith("sqlite")


def _engine_kwargs() -> dict:
    kwargs = {"pool_pre_ping": True}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 15}
    else:
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs())

if is_sqlite:

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA busy_timeout=60000;")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session; workflow functions commit their own unit of work."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session():
    """Session for code outside a request (startup hooks, scripts)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
