"""User schemas."""
from pydantic import BaseModel
from typing import Optional


class UserBase(BaseModel):
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class UserCreate(UserBase):
    password_hash: Optional[bytes] = None
    password_salt: Optional[bytes] = None

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None and self.password_salt is not None


class UserUpdate(UserCreate):
    pass


class User(UserBase):
    id: int

    class Config:
        from_attributes = True
