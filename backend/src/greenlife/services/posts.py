"""Post lifecycle: creation, edits and draft/published transitions."""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from greenlife.models import Post, PostStatus, User
from greenlife.models.post import PostAuthor, PostCreate, PostRead, PostUpdate
from greenlife.services.sanitize import sanitize_html

# Fields replaced by an edit; status and published_at only change via set_status
CONTENT_FIELDS = (
    "title",
    "content",
    "category",
    "featured_image",
    "file_attachment",
    "apply_url",
    "location",
    "deadline",
)


def set_status(post: Post, new_status: PostStatus, now: datetime | None = None) -> Post:
    """Move a post to a new status, keeping published_at in step.

    Publishing always stamps published_at with the transition time, even when
    the post was already published.
    """
    post.status = new_status
    if new_status == PostStatus.PUBLISHED:
        post.published_at = now or datetime.now(UTC)
    else:
        post.published_at = None
    return post


def create_post(data: PostCreate, author_id: str, now: datetime | None = None) -> Post:
    """Build a new post from validated input."""
    post = Post(
        title=data.title,
        content=sanitize_html(data.content),
        category=data.category,
        author_id=author_id,
        featured_image=data.featured_image or None,
        file_attachment=data.file_attachment or None,
        apply_url=data.apply_url or None,
        location=data.location or None,
        deadline=data.deadline,
    )
    return set_status(post, data.status, now=now)


def apply_update(post: Post, data: PostUpdate) -> Post:
    """Replace a post's content fields."""
    values = data.model_dump(include=set(CONTENT_FIELDS))
    values["content"] = sanitize_html(values["content"])
    for field in CONTENT_FIELDS:
        value = values.get(field)
        # Empty strings clear optional fields
        setattr(post, field, value if value != "" else None)
    return post


async def get_author(session: AsyncSession, post: Post) -> PostAuthor | None:
    stmt = select(User).where(User.id == post.author_id)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()
    if not user:
        return None
    return PostAuthor(username=user.username, email=user.email)


def to_read(post: Post, author: PostAuthor | None) -> PostRead:
    return PostRead(
        id=post.id,
        title=post.title,
        content=post.content,
        category=post.category,
        status=post.status,
        featured_image=post.featured_image,
        file_attachment=post.file_attachment,
        apply_url=post.apply_url,
        location=post.location,
        deadline=post.deadline,
        author_id=post.author_id,
        author=author,
        created_at=post.created_at,
        published_at=post.published_at,
    )
