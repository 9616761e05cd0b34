"""
Database connection and session management.
Provides the Database pool object, the session dependency, and the base class for models.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import BigInteger, Integer, create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Create base class for declarative models
Base = declarative_base()

# 64-bit primary keys; SQLite only autoincrements a plain INTEGER primary key
BigIntId = BigInteger().with_variant(Integer, "sqlite")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Connection pool and session factory for one database.

    Built once when the application starts and stored on ``app.state``;
    request handlers receive sessions from it through :func:`get_db`.
    """

    def __init__(self, url: str, **engine_kwargs):
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)

        self.is_sqlite = url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if self.is_sqlite else {}

        self.engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False)

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self) -> None:
        """Create tables that do not exist yet."""
        # Import models so they are registered on Base.metadata
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Database dependency - Creates and yields a database session.

    The session is automatically closed after the request is processed,
    even if an exception occurs during request handling.

    Yields:
        SQLAlchemy Session: Database session
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Run a unit of work as one transaction.

    Commits when the block finishes and rolls back on any exception, which is
    re-raised unchanged for the caller to translate.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
