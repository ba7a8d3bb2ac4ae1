"""
Storage errors.

Every failure reported by the stores is one of these. Errors raised by the
database driver are wrapped in PersistenceError and kept as ``__cause__``.
"""
from typing import Optional


class StorageError(Exception):
    """Base class for storage errors."""


class PersistenceError(StorageError):
    """The database rejected a read or a write."""


class DeadlineExceededError(PersistenceError):
    """The caller's deadline expired before the operation finished."""


class NotFoundError(StorageError):
    """No live row exists for the requested identifier."""

    def __init__(self, entity: str, entity_id: Optional[int] = None, message: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} {entity_id} not found")
