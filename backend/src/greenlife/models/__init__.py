"""SQLModel database models."""

from greenlife.models.base import TimestampMixin
from greenlife.models.post import Post, PostCategory, PostStatus
from greenlife.models.submission import (
    ContactSubmission,
    Donation,
    NewsletterSubscription,
    PartnershipInquiry,
    VolunteerApplication,
)
from greenlife.models.user import Role, User

__all__ = [
    "ContactSubmission",
    "Donation",
    "NewsletterSubscription",
    "PartnershipInquiry",
    "Post",
    "PostCategory",
    "PostStatus",
    "Role",
    "TimestampMixin",
    "User",
    "VolunteerApplication",
]
