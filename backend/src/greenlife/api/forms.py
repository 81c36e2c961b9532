"""Public form submission endpoints.

Each submission is stored before any email goes out, so a delivery failure
never loses the record.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, status
from sqlmodel import select

from greenlife.api.deps import FormsRateLimit, SessionDep
from greenlife.models import (
    ContactSubmission,
    Donation,
    NewsletterSubscription,
    PartnershipInquiry,
    VolunteerApplication,
)
from greenlife.models.submission import (
    ContactCreate,
    DonationCreate,
    PartnershipCreate,
    SubscriptionCreate,
    VolunteerCreate,
)
from greenlife.schemas import ErrorResponse, SubmissionResponse
from greenlife.services.email import email_service
from greenlife.services.sanitize import strip_markup, strip_optional

logger = logging.getLogger(__name__)

router = APIRouter(responses={502: {"model": ErrorResponse}})


def _ensure_sent(sent: bool, kind: str, record_id: str) -> None:
    if not sent:
        logger.error(f"Email for {kind} {record_id} could not be delivered")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send email",
        )


@router.post("/contact", response_model=SubmissionResponse)
async def submit_contact(data: ContactCreate, session: SessionDep, _rate_limit: FormsRateLimit):
    """Store a contact message and forward it to staff."""
    submission = ContactSubmission(
        name=strip_markup(data.name),
        email=str(data.email),
        subject=strip_optional(data.subject),
        message=strip_markup(data.message),
        preferred_contact=data.preferred_contact,
    )
    session.add(submission)
    await session.commit()

    sent = await email_service.send_contact_message(submission)
    _ensure_sent(sent, "contact submission", submission.id)
    return SubmissionResponse(id=submission.id)


@router.post("/volunteer", response_model=SubmissionResponse)
async def submit_volunteer(data: VolunteerCreate, session: SessionDep, _rate_limit: FormsRateLimit):
    """Store a volunteer application and notify staff."""
    application = VolunteerApplication(
        full_name=strip_markup(data.full_name),
        email=str(data.email),
        interest=data.interest,
        availability=data.availability,
    )
    session.add(application)
    await session.commit()

    sent = await email_service.send_volunteer_application(application)
    _ensure_sent(sent, "volunteer application", application.id)
    return SubmissionResponse(id=application.id)


@router.post("/partner", response_model=SubmissionResponse)
async def submit_partnership(
    data: PartnershipCreate, session: SessionDep, _rate_limit: FormsRateLimit
):
    """Store a partnership proposal and notify staff."""
    inquiry = PartnershipInquiry(
        organization=strip_markup(data.organization),
        contact_email=str(data.contact_email),
        partnership_type=data.partnership_type,
        proposal=strip_markup(data.proposal),
    )
    session.add(inquiry)
    await session.commit()

    sent = await email_service.send_partnership_inquiry(inquiry)
    _ensure_sent(sent, "partnership inquiry", inquiry.id)
    return SubmissionResponse(id=inquiry.id)


@router.post("/donate", response_model=SubmissionResponse)
async def submit_donation(data: DonationCreate, session: SessionDep, _rate_limit: FormsRateLimit):
    """Record a donation pledge and acknowledge it to the donor.

    Payment capture happens outside this service; the pledge stays PENDING.
    """
    donation = Donation(
        amount=data.amount,
        frequency=data.frequency,
        donor_email=str(data.donor_email),
    )
    session.add(donation)
    await session.commit()

    logger.info(f"Donation pledge {donation.id} recorded ({donation.frequency.value})")

    sent = await email_service.send_donation_acknowledgement(donation)
    _ensure_sent(sent, "donation", donation.id)
    return SubmissionResponse(id=donation.id)


@router.post("/subscriptions", response_model=SubmissionResponse)
async def subscribe(data: SubscriptionCreate, session: SessionDep, _rate_limit: FormsRateLimit):
    """Subscribe an address to the newsletter.

    Subscribing an existing address is a no-op apart from clearing a prior
    unsubscribe.
    """
    email = str(data.email).lower()

    stmt = select(NewsletterSubscription).where(NewsletterSubscription.email == email)
    result = await session.execute(stmt)
    subscription = result.scalar_one_or_none()

    if subscription and subscription.unsubscribed_at is None:
        return SubmissionResponse(id=subscription.id)

    if subscription:
        subscription.unsubscribed_at = None
        subscription.subscribed_at = datetime.now(UTC)
    else:
        subscription = NewsletterSubscription(email=email)
        session.add(subscription)
    await session.commit()

    notified = await email_service.send_subscription_notice(email)
    welcomed = await email_service.send_newsletter_welcome(email)
    _ensure_sent(notified and welcomed, "newsletter subscription", subscription.id)
    return SubmissionResponse(id=subscription.id)
