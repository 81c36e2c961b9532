"""Records created by the public site forms."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import EmailStr
from sqlalchemy import Column, DateTime, Numeric, Text
from sqlmodel import Field, SQLModel

from greenlife.models.base import TimestampMixin, generate_nanoid, utcnow


class VolunteerInterest(str, Enum):
    FIELDWORK = "FIELDWORK"
    EDUCATION = "EDUCATION"
    RESEARCH = "RESEARCH"


class Availability(str, Enum):
    WEEKDAYS = "WEEKDAYS"
    WEEKENDS = "WEEKENDS"
    BOTH = "BOTH"


class PartnershipType(str, Enum):
    CORPORATE = "CORPORATE"
    COMMUNITY = "COMMUNITY"
    RESEARCH = "RESEARCH"


class DonationFrequency(str, Enum):
    ONE_TIME = "ONE_TIME"
    MONTHLY = "MONTHLY"
    ANNUAL = "ANNUAL"


class DonationStatus(str, Enum):
    """Donations are recorded as pledges; capture happens outside this service."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ContactSubmission(TimestampMixin, SQLModel, table=True):
    """Message sent through the contact form."""

    __tablename__ = "contact_submissions"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    name: str = Field(max_length=50)
    email: str = Field(max_length=255)
    subject: str | None = Field(default=None, max_length=100)
    message: str = Field(sa_column=Column(Text, nullable=False))
    preferred_contact: str = Field(default="email", max_length=10)


class VolunteerApplication(TimestampMixin, SQLModel, table=True):
    """Volunteer sign-up."""

    __tablename__ = "volunteer_applications"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    full_name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    interest: VolunteerInterest
    availability: Availability


class PartnershipInquiry(TimestampMixin, SQLModel, table=True):
    """Partnership proposal from an organization."""

    __tablename__ = "partnership_inquiries"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    organization: str = Field(max_length=255)
    contact_email: str = Field(max_length=255)
    partnership_type: PartnershipType
    proposal: str = Field(sa_column=Column(Text, nullable=False))


class Donation(TimestampMixin, SQLModel, table=True):
    """Donation pledge."""

    __tablename__ = "donations"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    amount: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    frequency: DonationFrequency
    donor_email: str = Field(max_length=255, index=True)
    status: DonationStatus = Field(default=DonationStatus.PENDING)


class NewsletterSubscription(TimestampMixin, SQLModel, table=True):
    """Newsletter subscriber; unsubscribed_at is set when they opt out."""

    __tablename__ = "newsletter_subscriptions"

    id: str = Field(default_factory=generate_nanoid, primary_key=True, max_length=21)
    email: str = Field(unique=True, index=True, max_length=255)
    subscribed_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),  # type: ignore[call-overload]
    )
    unsubscribed_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )


# Request schemas


class ContactCreate(SQLModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    subject: str | None = Field(default=None, max_length=100)
    message: str = Field(min_length=10, max_length=1000)
    preferred_contact: Literal["email", "phone"] = "email"


class VolunteerCreate(SQLModel):
    full_name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    interest: VolunteerInterest
    availability: Availability


class PartnershipCreate(SQLModel):
    organization: str = Field(min_length=2, max_length=255)
    contact_email: EmailStr
    partnership_type: PartnershipType
    proposal: str = Field(min_length=50)


class DonationCreate(SQLModel):
    amount: Decimal = Field(ge=5, max_digits=10, decimal_places=2)
    frequency: DonationFrequency
    donor_email: EmailStr


class SubscriptionCreate(SQLModel):
    email: EmailStr
