"""User domain models.

SQLModel table definition for User.
"""

from enum import Enum

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from app.core.mixins import TimestampMixin


class UserStatus(str, Enum):
    """User record status. New records default to active."""

    active = "Active"
    inactive = "InActive"


class Gender(str, Enum):
    male = "Male"
    female = "Female"


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    ``id`` is an autoincrementing integer. SQLite only guarantees that ids of
    deleted rows are never reused with AUTOINCREMENT, hence the table arg. The
    id also breaks ties between records created within the same second.
    """

    __tablename__: str = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: EmailStr = Field(index=True, unique=True, max_length=255)
    mobile: str = Field(max_length=10)
    gender: Gender = Field(max_length=10)
    status: UserStatus = Field(default=UserStatus.active, max_length=10, index=True)
    profile: str | None = Field(default=None, max_length=255)
    location: str = Field(max_length=100)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
