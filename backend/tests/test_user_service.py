import pytest
from sqlalchemy.orm import Session

from flightlog import schemas
from flightlog.errors import NotFoundError, PersistenceError
from flightlog.models import Credentials, User
from flightlog.services import user_service


def make_user(username: str = "klyngen", **kwargs) -> schemas.UserCreate:
    values = {
        "username": username,
        "first_name": "Kari",
        "last_name": "Nordmann",
        "email": f"{username}@example.com",
        "password_hash": b"hash",
        "password_salt": b"salt",
    }
    values.update(kwargs)
    return schemas.UserCreate(**values)


class TestUserService:

    def test_create_user_with_credentials(self, db: Session) -> None:
        created = user_service.create_user(db, make_user())

        assert created.id is not None
        assert created.username == "klyngen"
        credentials = db.query(Credentials).filter_by(user_id=created.id).one()
        assert (credentials.password_hash, credentials.password_salt) == (b"hash", b"salt")

    def test_create_user_without_password(self, db: Session) -> None:
        created = user_service.create_user(db, make_user(password_hash=None, password_salt=None))

        assert db.query(Credentials).filter_by(user_id=created.id).count() == 0

    def test_duplicate_username(self, db: Session) -> None:
        user_service.create_user(db, make_user())

        with pytest.raises(PersistenceError):
            user_service.create_user(db, make_user())
        assert db.query(User).count() == 1
        assert db.query(Credentials).count() == 1

    def test_get_user(self, db: Session) -> None:
        created = user_service.create_user(db, make_user())
        assert user_service.get_user(db, created.id) == created

    def test_get_unknown_user(self, db: Session) -> None:
        with pytest.raises(NotFoundError):
            user_service.get_user(db, 1)

    def test_get_all_users_paginates(self, db: Session) -> None:
        for index in range(5):
            user_service.create_user(db, make_user(username=f"pilot{index}"))

        first = user_service.get_all_users(db, limit=2, page=1)
        third = user_service.get_all_users(db, limit=2, page=3)

        assert [u.username for u in first] == ["pilot0", "pilot1"]
        assert [u.username for u in third] == ["pilot4"]
        assert user_service.get_all_users(db, limit=2, page=4) == []

    @pytest.mark.parametrize("limit, page", [(0, 1), (10, 0)])
    def test_get_all_users_rejects_bad_paging(self, db: Session, limit: int, page: int) -> None:
        with pytest.raises(ValueError):
            user_service.get_all_users(db, limit=limit, page=page)

    def test_update_user_and_password(self, db: Session) -> None:
        created = user_service.create_user(db, make_user())

        update = schemas.UserUpdate(
            username="klyngen",
            first_name="Ola",
            email="ola@example.com",
            password_hash=b"new-hash",
            password_salt=b"new-salt",
        )
        updated = user_service.update_user(db, created.id, update)

        assert updated.first_name == "Ola"
        assert updated.last_name is None
        db.expire_all()
        credentials = db.query(Credentials).filter_by(user_id=created.id).one()
        assert (credentials.password_hash, credentials.password_salt) == (b"new-hash", b"new-salt")

    def test_update_password_without_credentials(self, db: Session) -> None:
        created = user_service.create_user(db, make_user(password_hash=None, password_salt=None))

        with pytest.raises(NotFoundError):
            user_service.update_user(db, created.id, make_user(first_name="Changed"))

        db.expire_all()
        assert user_service.get_user(db, created.id).first_name == "Kari"

    def test_update_unknown_user(self, db: Session) -> None:
        with pytest.raises(NotFoundError):
            user_service.update_user(db, 77, make_user())

    def test_delete_user_removes_credentials(self, db: Session) -> None:
        created = user_service.create_user(db, make_user())

        user_service.delete_user(db, created.id)

        assert db.query(User).count() == 0
        assert db.query(Credentials).count() == 0

    def test_delete_unknown_user(self, db: Session) -> None:
        with pytest.raises(NotFoundError):
            user_service.delete_user(db, 5)
