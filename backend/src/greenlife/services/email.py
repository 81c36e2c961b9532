"""Email service for sending transactional emails."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from html import escape
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib
import httpx

from greenlife.config import settings
from greenlife.models import (
    ContactSubmission,
    Donation,
    PartnershipInquiry,
    VolunteerApplication,
)
from greenlife.models.submission import DonationFrequency

logger = logging.getLogger(__name__)

BRAND_COLOR = "#2B6A3C"


class EmailBackend(ABC):
    """Abstract base class for email backends."""

    @abstractmethod
    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            html: HTML content
            text: Plain text content (optional)
            reply_to: Address replies should go to (optional)

        Returns:
            True if sent successfully
        """
        pass


class ConsoleEmailBackend(EmailBackend):
    """Email backend that logs to console (for development)."""

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """Log email to console instead of sending."""
        logger.info(
            f"\n{'='*60}\n"
            f"EMAIL (console backend - not sent)\n"
            f"{'='*60}\n"
            f"To: {to}\n"
            f"Reply-To: {reply_to or '-'}\n"
            f"Subject: {subject}\n"
            f"{'='*60}\n"
            f"{text or html}\n"
            f"{'='*60}\n"
        )
        return True


class SMTPEmailBackend(EmailBackend):
    """Email backend using SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        from_address: str = "",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_address = from_address

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """Send email via SMTP."""
        message = MIMEMultipart("alternative")
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = subject
        if reply_to:
            message["Reply-To"] = reply_to

        if text:
            message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=self.use_tls,
            )
            logger.info(f"Email sent via SMTP to {to}")
            return True
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email via SMTP to {to}: {e}")
            return False


class ResendEmailBackend(EmailBackend):
    """Email backend using Resend API."""

    def __init__(self, api_key: str, from_address: str):
        self.api_key = api_key
        self.from_address = from_address

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """Send email via Resend API."""
        body: dict = {
            "from": self.from_address,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            body["text"] = text
        if reply_to:
            body["reply_to"] = reply_to

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    "https://api.resend.com/emails",
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=body,
                    timeout=30.0,
                )
                response.raise_for_status()
                logger.info(f"Email sent via Resend to {to}")
                return True
            except httpx.HTTPStatusError as e:
                logger.error(f"Resend API error: {e.response.status_code} - {e.response.text}")
                return False
            except httpx.HTTPError as e:
                logger.error(f"Failed to send email via Resend to {to}: {e}")
                return False


def get_email_backend() -> EmailBackend:
    """Get the configured email backend."""
    if settings.email_backend == "console":
        return ConsoleEmailBackend()
    elif settings.email_backend == "smtp":
        return SMTPEmailBackend(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            from_address=settings.email_from,
        )
    elif settings.email_backend == "resend":
        return ResendEmailBackend(
            api_key=settings.resend_api_key,
            from_address=settings.email_from,
        )
    else:
        raise ValueError(f"Unknown email backend: {settings.email_backend}")


def _layout(title: str, body: str) -> str:
    """Wrap a message body in the shared branded layout."""
    year = datetime.now(UTC).year
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
</head>
<body style="margin: 0; padding: 0; background-color: #f9fafb; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
    <div style="max-width: 600px; margin: 40px auto; padding: 0 20px;">
        <div style="background: {BRAND_COLOR}; padding: 24px; text-align: center; border-radius: 12px 12px 0 0;">
            <h1 style="color: #ffffff; font-size: 22px; margin: 0;">{title}</h1>
        </div>
        <div style="background: #ffffff; padding: 24px; color: #334155; line-height: 1.6;">
            {body}
        </div>
        <div style="text-align: center; color: #64748b; font-size: 12px; padding: 16px;">
            &copy; {year} Green For Life. All rights reserved.
        </div>
    </div>
</body>
</html>
"""


def _field(label: str, value: str) -> str:
    return (
        f'<p style="margin: 0 0 12px;"><strong style="color: {BRAND_COLOR};">{label}:</strong> '
        f"{escape(value)}</p>"
    )


class EmailService:
    """High-level email service for the site's forms.

    Values passed in are stripped plain text; they are escaped when rendered
    into the HTML part.
    """

    def __init__(self, backend: EmailBackend | None = None):
        self._backend = backend

    @property
    def backend(self) -> EmailBackend:
        """Lazy-load the backend."""
        if self._backend is None:
            self._backend = get_email_backend()
        return self._backend

    async def send_contact_message(self, submission: ContactSubmission) -> bool:
        """Forward a contact form message to the staff inbox."""
        subject = submission.subject or f"New message from {submission.name}"
        html = _layout(
            "New Contact Request",
            _field("Name", submission.name)
            + _field("Email", submission.email)
            + _field("Preferred Contact", submission.preferred_contact)
            + f'<div style="white-space: pre-wrap; background: #f1f7f3; padding: 16px; border-radius: 8px;">'
            f"{escape(submission.message)}</div>",
        )
        text = (
            f"Name: {submission.name}\n"
            f"Email: {submission.email}\n"
            f"Preferred Contact: {submission.preferred_contact}\n"
            f"Message: {submission.message}\n"
        )
        return await self.backend.send(
            to=settings.contact_email,
            subject=subject,
            html=html,
            text=text,
            reply_to=submission.email,
        )

    async def send_volunteer_application(self, application: VolunteerApplication) -> bool:
        html = _layout(
            "New Volunteer Application",
            _field("Name", application.full_name)
            + _field("Email", application.email)
            + _field("Areas of Interest", application.interest.value)
            + _field("Availability", application.availability.value),
        )
        return await self.backend.send(
            to=settings.contact_email,
            subject=f"New Volunteer Application from {application.full_name}",
            html=html,
            reply_to=application.email,
        )

    async def send_partnership_inquiry(self, inquiry: PartnershipInquiry) -> bool:
        html = _layout(
            "New Partnership Proposal",
            _field("Organization", inquiry.organization)
            + _field("Contact Email", inquiry.contact_email)
            + _field("Partnership Type", inquiry.partnership_type.value)
            + f'<div style="white-space: pre-wrap; background: #f5f5f5; padding: 15px; border-radius: 5px;">'
            f"{escape(inquiry.proposal)}</div>",
        )
        return await self.backend.send(
            to=settings.contact_email,
            subject=f"New Partnership Proposal from {inquiry.organization}",
            html=html,
            reply_to=inquiry.contact_email,
        )

    async def send_donation_acknowledgement(self, donation: Donation) -> bool:
        """Thank a donor for their pledge."""
        recurring = donation.frequency != DonationFrequency.ONE_TIME
        kind = f"{donation.frequency.value.lower()} " if recurring else ""
        body = (
            f"<h3>Thank you for your {kind}donation of ${donation.amount}!</h3>"
            "<p>Your contribution supports our sustainability initiatives.</p>"
        )
        if recurring:
            body += (
                "<p>Your donation will be processed automatically according to "
                "your selected frequency.</p>"
            )
        return await self.backend.send(
            to=donation.donor_email,
            subject="Thank you for your donation",
            html=_layout("Donation Received", body),
        )

    async def send_subscription_notice(self, email: str) -> bool:
        """Tell staff about a new newsletter subscriber."""
        html = _layout(
            "New Newsletter Subscription",
            "<p>A new user has subscribed to the newsletter:</p>" + _field("Email", email),
        )
        return await self.backend.send(
            to=settings.contact_email,
            subject="New Newsletter Subscription",
            html=html,
            reply_to=email,
        )

    async def send_newsletter_welcome(self, email: str) -> bool:
        html = _layout(
            "Welcome to Green For Life!",
            "<p>Thank you for subscribing to our newsletter. You'll now receive updates "
            "about our latest initiatives and events.</p>"
            "<p>Best regards,<br>The Green For Life Team</p>",
        )
        return await self.backend.send(
            to=email,
            subject="Welcome to the Green For Life Newsletter!",
            html=html,
        )


# Global email service instance
email_service = EmailService()
