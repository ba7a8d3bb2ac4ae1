"""
SQLAlchemy models for the flight log store.
"""
from flightlog.models.base import Base, TimestampMixin, SoftDeleteMixin
from flightlog.models.location import Coordinates, CountryPart, Location
from flightlog.models.user import User, Credentials

__all__ = [
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "Coordinates",
    "CountryPart",
    "Location",
    "User",
    "Credentials",
]
