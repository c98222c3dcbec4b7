"""
Database Engine & Sessions
==========================
One engine with a bounded connection pool is created at import time and
shared by every request. Each request gets its own Session through the
``get_db`` dependency; the Session only checks a connection out of the pool
on its first statement and returns it on close.
"""
import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def create_db_engine(url: str, **overrides) -> Engine:
    """
    Build the engine for ``url``.

    Pool settings:
    - pool_size / max_overflow: hard cap on concurrent connections
    - pool_timeout: seconds to wait for a free connection before failing
    - pool_pre_ping: drop stale connections before use
    - pool_recycle: recycle connections before the server times them out

    For MySQL the statement timeout is enforced through the driver's
    read/write timeouts so a query never holds a pooled connection forever.
    """
    db_url = make_url(url)
    kwargs = {"echo": settings.SQLALCHEMY_ECHO, "pool_pre_ping": True}

    if db_url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
        if db_url.get_backend_name() == "mysql":
            kwargs["connect_args"] = {
                "connect_timeout": settings.DB_POOL_TIMEOUT,
                "read_timeout": settings.DB_STATEMENT_TIMEOUT,
                "write_timeout": settings.DB_STATEMENT_TIMEOUT,
            }

    kwargs.update(overrides)
    db_engine = create_engine(db_url, **kwargs)

    if db_url.get_backend_name() == "sqlite":
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)

    return db_engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


engine = create_db_engine(settings.database_uri)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one Session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ping(db_engine: Engine | None = None) -> bool:
    """Run ``SELECT 1``; used by the health endpoint."""
    try:
        with (db_engine or engine).connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError as e:
        logger.error(f"Database ping failed: {e.__class__.__name__}: {e}")
        return False
