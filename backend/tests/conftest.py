from typing import Any, Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from flightlog.config import get_settings
from flightlog.db.session import create_db_engine, drop_db, init_db

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch) -> Generator[None, Any, None]:
    """Isolate tests from the developer's environment"""
    monkeypatch.delenv("STATEMENT_TIMEOUT", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine() -> Generator[Engine, Any, None]:
    """In-memory SQLite engine with all tables created"""
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, Any, None]:
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()

