"""Post endpoints: public reading and admin editing."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel
from sqlmodel import select

from greenlife.api.deps import AdminIdentity, CurrentIdentityOptional, SessionDep
from greenlife.models import Post, PostCategory, PostStatus, Role, User
from greenlife.models.post import (
    PostAuthor,
    PostCreate,
    PostRead,
    PostStatusUpdate,
    PostUpdate,
)
from greenlife.schemas import ErrorResponse
from greenlife.services import posts as lifecycle

logger = logging.getLogger(__name__)

router = APIRouter(responses={404: {"model": ErrorResponse}})
admin_router = APIRouter()
categories_router = APIRouter()


class PostListResponse(BaseModel):
    posts: list[PostRead]


class PostResponse(BaseModel):
    post: PostRead


class Category(BaseModel):
    id: str
    name: str
    value: str


class CategoryListResponse(BaseModel):
    categories: list[Category]


async def _list_posts(
    session: SessionDep,
    status_filter: PostStatus | None,
    category: PostCategory | None,
) -> list[PostRead]:
    stmt = select(Post, User).outerjoin(User, User.id == Post.author_id)  # type: ignore[arg-type]
    if status_filter:
        stmt = stmt.where(Post.status == status_filter)
    if category:
        stmt = stmt.where(Post.category == category)
    stmt = stmt.order_by(Post.created_at.desc())  # type: ignore[attr-defined]

    result = await session.execute(stmt)
    return [
        lifecycle.to_read(
            post,
            PostAuthor(username=author.username, email=author.email) if author else None,
        )
        for post, author in result.all()
    ]


async def _get_post(session: SessionDep, post_id: str) -> Post:
    stmt = select(Post).where(Post.id == post_id)
    result = await session.execute(stmt)
    post = result.scalar_one_or_none()

    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    return post


@router.get("", response_model=PostListResponse)
async def list_posts(session: SessionDep, category: PostCategory | None = None):
    """List published posts, newest first, optionally filtered by category."""
    posts = await _list_posts(session, PostStatus.PUBLISHED, category)
    return PostListResponse(posts=posts)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, session: SessionDep, identity: CurrentIdentityOptional):
    """Get a post. Drafts are only visible to admins."""
    post = await _get_post(session, post_id)

    is_admin = identity is not None and identity.role == Role.ADMIN
    if post.status != PostStatus.PUBLISHED and not is_admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )

    author = await lifecycle.get_author(session, post)
    return PostResponse(post=lifecycle.to_read(post, author))


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(post_in: PostCreate, session: SessionDep, identity: AdminIdentity):
    """Create a post (admin only)."""
    stmt = select(User).where(User.id == identity.id)
    result = await session.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    post = lifecycle.create_post(post_in, author_id=user.id)
    session.add(post)
    await session.commit()
    await session.refresh(post)

    logger.info(f"Post {post.id} created by {user.id} as {post.status.value}")

    return PostResponse(
        post=lifecycle.to_read(post, PostAuthor(username=user.username, email=user.email))
    )


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_in: PostUpdate,
    session: SessionDep,
    _identity: AdminIdentity,
):
    """Replace a post's content (admin only). Status is left untouched."""
    post = await _get_post(session, post_id)

    lifecycle.apply_update(post, post_in)
    await session.commit()
    await session.refresh(post)

    author = await lifecycle.get_author(session, post)
    return PostResponse(post=lifecycle.to_read(post, author))


@router.put("/{post_id}/status", response_model=PostResponse)
async def update_post_status(
    post_id: str,
    status_in: PostStatusUpdate,
    session: SessionDep,
    identity: AdminIdentity,
):
    """Publish or unpublish a post (admin only)."""
    post = await _get_post(session, post_id)

    lifecycle.set_status(post, status_in.status)
    await session.commit()
    await session.refresh(post)

    logger.info(f"Post {post.id} set to {post.status.value} by {identity.id}")

    author = await lifecycle.get_author(session, post)
    return PostResponse(post=lifecycle.to_read(post, author))


@admin_router.get("", response_model=PostListResponse)
async def list_all_posts(
    session: SessionDep,
    _identity: AdminIdentity,
    status_filter: Annotated[PostStatus | None, Query(alias="status")] = None,
    category: PostCategory | None = None,
):
    """List every post including drafts (admin only)."""
    posts = await _list_posts(session, status_filter, category)
    return PostListResponse(posts=posts)


@categories_router.get("", response_model=CategoryListResponse)
async def list_categories():
    """List post categories with display names."""
    return CategoryListResponse(
        categories=[
            Category(id=category.value, name=category.display_name, value=category.value)
            for category in PostCategory
        ]
    )
