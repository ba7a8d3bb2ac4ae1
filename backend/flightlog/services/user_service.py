"""User service - CRUD operations for users and their credentials."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flightlog import schemas
from flightlog.db.session import transaction
from flightlog.errors import NotFoundError, PersistenceError
from flightlog.models.user import Credentials, User

logger = logging.getLogger(__name__)


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def create_user(db: Session, user: schemas.UserCreate) -> schemas.User:
    """Create a user, and its credentials when a password is supplied."""
    db_user = User(
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
    )
    if user.has_password:
        db_user.credentials = Credentials(
            password_hash=user.password_hash,
            password_salt=user.password_salt,
        )

    try:
        with transaction(db):
            db.add(db_user)
            db.flush()
            created = schemas.User.model_validate(db_user)
    except SQLAlchemyError as exc:
        logger.warning("Unable to create user %r: %s", user.username, exc)
        raise PersistenceError("Unable to create the user") from exc

    logger.info("Created user %s", created.id)
    return created


def get_all_users(db: Session, limit: int = 50, page: int = 1) -> list[schemas.User]:
    """Get one page of users ordered by id. Pages start at 1."""
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if page < 1:
        raise ValueError("page must be at least 1")

    try:
        users = (
            db.query(User)
            .order_by(User.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [schemas.User.model_validate(u) for u in users]
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to get users") from exc


def get_user(db: Session, user_id: int) -> schemas.User:
    try:
        return schemas.User.model_validate(_get_user(db, user_id))
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to get user") from exc


def update_user(db: Session, user_id: int, user: schemas.UserUpdate) -> schemas.User:
    """
    Overwrite the profile of an existing user.

    If both password hash and salt are given the stored credentials are
    replaced as well.
    """
    try:
        with transaction(db):
            db_user = _get_user(db, user_id)
            db_user.username = user.username
            db_user.first_name = user.first_name
            db_user.last_name = user.last_name
            db_user.email = user.email

            if user.has_password:
                if db_user.credentials is None:
                    raise NotFoundError("Credentials", user_id, "Unable to update password details")
                db_user.credentials.password_hash = user.password_hash
                db_user.credentials.password_salt = user.password_salt

            db.flush()
            updated = schemas.User.model_validate(db_user)
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to update the user") from exc

    logger.info("Updated user %s", user_id)
    return updated


def delete_user(db: Session, user_id: int) -> None:
    """Hard-delete a user together with its credentials."""
    try:
        with transaction(db):
            db.delete(_get_user(db, user_id))
            db.flush()
    except SQLAlchemyError as exc:
        raise PersistenceError("Unable to delete the user") from exc

    logger.info("Deleted user %s", user_id)
