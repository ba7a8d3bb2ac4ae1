"""
Database engine and session setup.

Provides:
- Engine and session factory built from Settings (lazily, once per process)
- `transaction()` to run several statements as one unit of work
- `Deadline` to bound an operation with a caller-supplied timeout
- `init_db()` to create tables for development and tests
"""
import logging
import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import Session, sessionmaker

from flightlog.config import get_settings
from flightlog.errors import DeadlineExceededError

logger = logging.getLogger(__name__)


def create_db_engine(url: Union[str, URL], echo: bool = False, **kwargs) -> Engine:
    """Create an engine, with SQLite tuned for foreign keys and savepoints."""
    engine = create_engine(url, echo=echo, **kwargs)

    if engine.dialect.name == "sqlite":
        # pysqlite defers BEGIN and ignores foreign keys unless told otherwise
        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return create_db_engine(settings.sqlalchemy_url, echo=settings.debug, pool_pre_ping=True)


@lru_cache
def get_session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False)


def get_db() -> Iterator[Session]:
    """Yield a session and close it afterwards."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all tables. Safe to run multiple times."""
    from flightlog.models import Base

    Base.metadata.create_all(engine or get_engine())


def drop_db(engine: Optional[Engine] = None) -> None:
    """Drop all tables (for testing)."""
    from flightlog.models import Base

    Base.metadata.drop_all(engine or get_engine())


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything done in the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise


class Deadline:
    """A point in time after which an operation must give up."""

    def __init__(self, timeout: Optional[float] = None):
        if timeout is None:
            timeout = get_settings().statement_timeout
        self.timeout = timeout
        self.expires_at = None if timeout is None else time.monotonic() + timeout

    @property
    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return self.expires_at - time.monotonic()

    def check(self, operation: str) -> None:
        remaining = self.remaining
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError(f"Deadline exceeded before: {operation}")

    @contextmanager
    def bound(self, db: Session) -> Iterator[None]:
        """
        Push the remaining time to the server while the block runs.

        Only use inside an open transaction: PostgreSQL drops `SET LOCAL` at
        transaction end, MySQL gets its session limit restored on exit.
        """
        remaining = self.remaining
        dialect = db.get_bind().dialect.name
        if remaining is None or dialect not in ("postgresql", "mysql", "mariadb"):
            yield
            return

        millis = max(int(remaining * 1000), 1)
        if dialect == "postgresql":
            db.execute(text(f"SET LOCAL statement_timeout = {millis}"))
            yield
            return

        db.execute(text(f"SET max_execution_time = {millis}"))
        try:
            yield
        finally:
            db.execute(text("SET max_execution_time = DEFAULT"))
