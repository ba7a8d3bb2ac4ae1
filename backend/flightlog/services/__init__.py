"""
Storage services.

Services handle the persistence logic between callers and the database.
"""
from flightlog.services import location_service
from flightlog.services import user_service
