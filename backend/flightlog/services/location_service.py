"""
Location service - CRUD operations for locations.

Provides:
- Location create/read/update/soft-delete
- Prefix search by name
- CountryPart deduplication (one row per area/postal code/country part)

Every aggregate write runs in a single transaction: the Coordinates row, the
CountryPart lookup-or-insert and the Location row are committed together or
not at all.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from flightlog import schemas
from flightlog.db.session import Deadline, transaction
from flightlog.errors import NotFoundError, PersistenceError
from flightlog.models.location import Coordinates, CountryPart, Location

logger = logging.getLogger(__name__)


def _to_schema(location: Location) -> schemas.Location:
    part = location.country_part
    return schemas.Location(
        id=location.id,
        name=location.name,
        longitude=location.coordinates.longitude,
        latitude=location.coordinates.latitude,
        area_name=part.area_name if part else "",
        postal_code=part.postal_code if part else "",
        country_part=part.country_part if part else "",
        coordinates_id=location.coordinates_id,
        country_part_id=location.country_part_id,
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _flush(db: Session, message: str) -> None:
    try:
        db.flush()
    except SQLAlchemyError as exc:
        logger.warning("%s: %s", message, exc)
        raise PersistenceError(message) from exc


def _get_live_location(db: Session, location_id: int) -> Location:
    location = (
        db.query(Location)
        .filter(Location.id == location_id, Location.deleted_at.is_(None))
        .first()
    )
    if location is None:
        raise NotFoundError("Location", location_id)
    return location


def _find_country_part(
    db: Session,
    part: schemas.CountryPartBase,
    for_update: bool = False,
) -> Optional[int]:
    query = db.query(CountryPart.id).filter(
        CountryPart.area_name == part.area_name,
        CountryPart.postal_code == part.postal_code,
        CountryPart.country_part == part.country_part,
    )
    if for_update:
        # Locking read: sees rows committed after a REPEATABLE READ snapshot
        query = query.with_for_update()
    row = query.first()
    return row[0] if row else None


def resolve_country_part(db: Session, part: schemas.CountryPartBase) -> Optional[int]:
    """
    Return the id of the CountryPart matching `part`, creating it if needed.

    The empty part means "no country part" and resolves to None without
    touching the database. The insert runs in a savepoint; if another caller
    stored the same triple first, the unique constraint rejects ours and the
    existing row is returned instead.
    """
    if part.is_empty():
        return None

    try:
        existing_id = _find_country_part(db, part)
        if existing_id is not None:
            return existing_id

        db_part = CountryPart(
            area_name=part.area_name,
            postal_code=part.postal_code,
            country_part=part.country_part,
        )
        try:
            with db.begin_nested():
                db.add(db_part)
                db.flush()
        except IntegrityError as exc:
            existing_id = _find_country_part(db, part, for_update=True)
            if existing_id is None:
                raise PersistenceError("Unable to store country part") from exc
            logger.warning(
                "Country part %r was stored concurrently, reusing id %s",
                (part.area_name, part.postal_code, part.country_part),
                existing_id,
            )
            return existing_id

        logger.info("Created country part %s", db_part.id)
        return db_part.id
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to resolve country part") from exc


def create_location(
    db: Session,
    location: schemas.LocationCreate,
    timeout: Optional[float] = None,
) -> schemas.Location:
    """
    Create a location with its coordinates and (deduplicated) country part.

    Coordinates are stored first so the location can reference them.
    """
    deadline = Deadline(timeout)
    try:
        deadline.check("store coordinates")
        with transaction(db), deadline.bound(db):
            coordinates = Coordinates(longitude=location.longitude, latitude=location.latitude)
            db.add(coordinates)
            _flush(db, "Unable to store coordinates")

            deadline.check("resolve country part")
            part_id = resolve_country_part(db, location.country_part_value)

            deadline.check("create location")
            db_location = Location(
                name=location.name,
                coordinates_id=coordinates.id,
                country_part_id=part_id,
            )
            db.add(db_location)
            _flush(db, "Could not create the location")

            db.refresh(db_location)
            created = _to_schema(db_location)
    except SQLAlchemyError as exc:
        raise PersistenceError("Could not create the location") from exc

    logger.info(
        "Created location %s (coordinates=%s, country_part=%s)",
        created.id,
        created.coordinates_id,
        created.country_part_id,
    )
    return created


def update_location(
    db: Session,
    location_id: int,
    location: schemas.LocationUpdate,
    timeout: Optional[float] = None,
) -> schemas.Location:
    """
    Update the name and country part of a location.

    Coordinates are immutable once stored: longitude and latitude in
    `location` are ignored.
    """
    deadline = Deadline(timeout)
    try:
        deadline.check("load location")
        with transaction(db), deadline.bound(db):
            existing = _get_live_location(db, location_id)

            deadline.check("resolve country part")
            part_id = resolve_country_part(db, location.country_part_value)

            deadline.check("update location")
            existing.name = location.name
            existing.country_part_id = part_id
            _flush(db, "Unable to update the location")

            db.refresh(existing)
            updated = _to_schema(existing)
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to update the location") from exc

    logger.info("Updated location %s (country_part=%s)", location_id, updated.country_part_id)
    return updated


def delete_location(db: Session, location_id: int, timeout: Optional[float] = None) -> None:
    """Soft-delete a location. The row and its coordinates stay in place."""
    deadline = Deadline(timeout)
    try:
        deadline.check("load location")
        with transaction(db), deadline.bound(db):
            existing = _get_live_location(db, location_id)
            existing.soft_delete()
            _flush(db, "Unable to delete the location")
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to delete the location") from exc

    logger.info("Deleted location %s", location_id)


def location_search_by_name(
    db: Session,
    name: str,
    timeout: Optional[float] = None,
) -> list[schemas.Location]:
    """Find live locations whose name starts with `name`, ignoring case."""
    Deadline(timeout).check("search locations")
    pattern = _escape_like(name.lower()) + "%"
    try:
        locations = (
            db.query(Location)
            .filter(
                Location.deleted_at.is_(None),
                func.lower(Location.name).like(pattern, escape="\\"),
            )
            .order_by(Location.name, Location.id)
            .all()
        )
        return [_to_schema(loc) for loc in locations]
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to find locations") from exc


def get_location(db: Session, location_id: int, timeout: Optional[float] = None) -> schemas.Location:
    """Get a live location. Soft-deleted rows count as missing."""
    Deadline(timeout).check("get location")
    try:
        return _to_schema(_get_live_location(db, location_id))
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to get location") from exc
