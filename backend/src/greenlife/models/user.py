"""User model."""

from enum import Enum

from sqlmodel import Field, SQLModel

from greenlife.models.base import TimestampMixin, generate_nanoid


class Role(str, Enum):
    """Coarse authorization tier carried inside identity tokens."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(TimestampMixin, SQLModel, table=True):
    """User account model."""

    __tablename__ = "users"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    username: str = Field(max_length=50)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=255)
    role: Role = Field(default=Role.USER)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class UserRead(SQLModel):
    """Schema for reading a user (never includes the password hash)."""

    id: str
    username: str
    email: str
    role: Role
