"""
Database access: engine, sessions, transactions and deadlines.
"""
from flightlog.db.session import (
    Deadline,
    create_db_engine,
    drop_db,
    get_db,
    get_engine,
    get_session_factory,
    init_db,
    transaction,
)

__all__ = [
    "Deadline",
    "create_db_engine",
    "drop_db",
    "get_db",
    "get_engine",
    "get_session_factory",
    "init_db",
    "transaction",
]
