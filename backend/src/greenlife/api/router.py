"""Main API router that aggregates all route modules."""

from fastapi import APIRouter

from greenlife.api import auth, forms, health, posts, upload

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Posts - public reads, admin writes
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(posts.categories_router, prefix="/categories", tags=["posts"])

# Public forms mount at the root: /contact, /volunteer, ...
api_router.include_router(forms.router, tags=["forms"])

api_router.include_router(upload.router, prefix="/upload", tags=["upload"])

# Admin endpoints
api_router.include_router(posts.admin_router, prefix="/admin/posts", tags=["admin"])
