"""
Plain data records passed in and out of the stores.
"""
from flightlog.schemas.location import (
    CountryPartBase,
    Location,
    LocationCreate,
    LocationUpdate,
)
from flightlog.schemas.user import User, UserCreate, UserUpdate

__all__ = [
    "CountryPartBase",
    "Location",
    "LocationCreate",
    "LocationUpdate",
    "User",
    "UserCreate",
    "UserUpdate",
]
