"""Engine, session factory and declarative base for campusdesk."""

import os
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./campusdesk.db")


def _engine_options(url: str) -> dict:
    options = {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "3600")),
        "echo": os.getenv("SQL_DEBUG", "false").lower() == "true",
    }
    if url.startswith("sqlite"):
        # Sync handlers run in FastAPI's threadpool, so connections cross threads
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = int(os.getenv("DB_POOL_SIZE", "10"))
        options["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "20"))
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)


def _session_scope(commit: bool) -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        if commit:
            db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Rolling back session after database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session. Services commit their own work."""
    yield from _session_scope(commit=False)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Session for work outside a request, such as the recurring-expense job.

    Commits when the block exits cleanly.
    """
    yield from _session_scope(commit=True)


def create_tables():
    # Registers every model on Base.metadata
    from . import models  # noqa: F401
    from .auth import models as auth_models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Could not create campusdesk tables: {e}")
        raise
    logger.info(f"Created {len(Base.metadata.tables)} tables")


def drop_tables():
    try:
        Base.metadata.drop_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Could not drop campusdesk tables: {e}")
        raise
    logger.info("Dropped all tables")


def check_database_connection() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database unreachable at startup: {e}")
        return False
    logger.info(f"Connected to {engine.dialect.name} database")
    return True
