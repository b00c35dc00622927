"""Outgoing email transports.

Local development talks SMTP (Mailpit, or Django's locmem backend in tests) through
Django's email framework. Production posts to the Mailgun messages API.
"""

import typing as t
from dataclasses import dataclass, field
from email.utils import make_msgid
from smtplib import SMTPException

import httpx
import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from notifications.exceptions import EmailNotConfiguredError, EmailProviderError

logger = structlog.get_logger(__name__)

MAILGUN_TIMEOUT = 10.0


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    html: str
    text: str = ""
    tags: list[str] = field(default_factory=list)


def send_email(message: OutgoingEmail) -> str:
    """Send an email with the configured provider and return the provider's message id.

    The id is returned without angle brackets, the form Mailgun uses in its webhooks.

    Raises:
        EmailProviderError: if the provider refused the message or could not be reached.
    """
    if settings.EMAIL_PROVIDER == "smtp":
        return _send_via_smtp(message)
    return _send_via_mailgun(message)


def _send_via_smtp(message: OutgoingEmail) -> str:
    message_id = make_msgid(domain=settings.EMAIL_MESSAGE_ID_DOMAIN)
    email_msg = EmailMultiAlternatives(
        subject=message.subject,
        body=message.text,
        from_email=settings.MAIL_FROM,
        to=[message.to],
        headers={"Message-ID": message_id},
    )
    email_msg.attach_alternative(message.html, "text/html")
    try:
        email_msg.send(fail_silently=False)
    except (SMTPException, OSError) as e:
        raise EmailProviderError(f"SMTP error: {e}") from e
    return message_id.strip("<>")


def _send_via_mailgun(message: OutgoingEmail) -> str:
    if not settings.MAILGUN_API_KEY or not settings.MAILGUN_DOMAIN:
        raise EmailNotConfiguredError(
            "Email configuration missing. Set MAILGUN_API_KEY and MAILGUN_DOMAIN for production, "
            "or SMTP_HOST for local development."
        )

    data: dict[str, t.Any] = {
        "from": settings.MAIL_FROM,
        "to": message.to,
        "subject": message.subject,
        "html": message.html,
    }
    if message.text:
        data["text"] = message.text
    if message.tags:
        data["o:tag"] = message.tags

    url = f"{settings.MAILGUN_REGION_BASE_URL}/v3/{settings.MAILGUN_DOMAIN}/messages"
    try:
        response = httpx.post(url, auth=("api", settings.MAILGUN_API_KEY), data=data, timeout=MAILGUN_TIMEOUT)
    except httpx.HTTPError as e:
        raise EmailProviderError(f"Mailgun request failed: {e}") from e

    if response.is_error:
        raise EmailProviderError(f"Mailgun error: {response.status_code} - {response.text}")

    message_id = str(response.json().get("id", ""))
    logger.debug("mailgun_message_accepted", message_id=message_id)
    return message_id.strip("<>")
