"""Post model for blog, news and career content."""

from datetime import datetime
from enum import Enum
from urllib.parse import urlparse

from pydantic import field_validator
from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel

from greenlife.models.base import TimestampMixin, generate_nanoid


class PostCategory(str, Enum):
    """Section of the site a post is listed under."""

    BLOG = "BLOG"
    PUBLICATION = "PUBLICATION"
    IMPACT_STORY = "IMPACT_STORY"
    TENDER = "TENDER"
    CAREER = "CAREER"

    @classmethod
    def _missing_(cls, value: object) -> "PostCategory | None":
        # Accept lower-case query values such as ?category=blog
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None

    @property
    def display_name(self) -> str:
        """Human readable name, e.g. IMPACT_STORY -> "Impact Story"."""
        return " ".join(word.capitalize() for word in self.value.split("_"))


class PostStatus(str, Enum):
    """Visibility of a post."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class Post(TimestampMixin, SQLModel, table=True):
    """A publishable unit of content.

    published_at is set exactly when status is PUBLISHED; transitions go
    through greenlife.services.posts.set_status.
    """

    __tablename__ = "posts"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    title: str = Field(max_length=255)
    content: str = Field(sa_column=Column(Text, nullable=False))
    category: PostCategory = Field(index=True)
    status: PostStatus = Field(default=PostStatus.DRAFT, index=True)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=21)
    published_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )

    # Media
    featured_image: str | None = Field(default=None, max_length=2048)
    file_attachment: str | None = Field(default=None, max_length=2048)

    # Only meaningful for CAREER posts
    apply_url: str | None = Field(default=None, max_length=2048)
    location: str | None = Field(default=None, max_length=255)
    deadline: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True)))


def _check_url_or_path(value: str | None) -> str | None:
    if not value:
        return value
    if value.startswith("/"):
        return value
    parsed = urlparse(value)
    if parsed.scheme and parsed.netloc:
        return value
    raise ValueError("Must be a valid URL or a relative path starting with '/'")


def _check_url(value: str | None) -> str | None:
    if not value:
        return value
    parsed = urlparse(value)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return value
    raise ValueError("Apply URL must be a valid URL")


class PostFields(SQLModel):
    """Editable content fields shared by create and update."""

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    category: PostCategory
    featured_image: str | None = None
    file_attachment: str | None = None
    apply_url: str | None = None
    location: str | None = Field(default=None, max_length=255)
    deadline: datetime | None = None

    @field_validator("featured_image", "file_attachment")
    @classmethod
    def validate_media(cls, value: str | None) -> str | None:
        return _check_url_or_path(value)

    @field_validator("apply_url")
    @classmethod
    def validate_apply_url(cls, value: str | None) -> str | None:
        return _check_url(value)


class PostCreate(PostFields):
    """Schema for creating a post."""

    status: PostStatus = PostStatus.DRAFT


class PostUpdate(PostFields):
    """Schema for editing a post's content.

    Replaces every content field; optional fields that are omitted are cleared.
    """


class PostStatusUpdate(SQLModel):
    """Schema for the status-change operation."""

    status: PostStatus


class PostAuthor(SQLModel):
    """Public author details embedded in post responses."""

    username: str
    email: str


class PostRead(SQLModel):
    """Schema for reading a post."""

    id: str
    title: str
    content: str
    category: PostCategory
    status: PostStatus
    featured_image: str | None
    file_attachment: str | None
    apply_url: str | None
    location: str | None
    deadline: datetime | None
    author_id: str
    author: PostAuthor | None = None
    created_at: datetime
    published_at: datetime | None
