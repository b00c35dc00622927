"""Email address verification."""

from datetime import timedelta

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from common.exceptions import RateLimitError, ValidationError
from common.tokens import generate_token_pair, hash_token
from notifications.enums import EmailTemplate
from notifications.models import EmailOutbox
from notifications.service import outbox
from notifications.tasks import deliver_email

logger = structlog.get_logger(__name__)

RESEND_COOLDOWN = timedelta(seconds=60)


def send_verification_email(user: User) -> EmailOutbox:
    """Issue a fresh verification link for the user and send it.

    Any previous link stops working because only the latest token digest is stored.
    """
    if user.email_verified:
        raise ValidationError("Email is already verified")

    token, token_hash = generate_token_pair()
    with transaction.atomic():
        user.verification_token_hash = token_hash
        user.verification_expires_at = timezone.now() + settings.VERIFY_TOKEN_LIFETIME
        user.save(update_fields=["verification_token_hash", "verification_expires_at", "updated_at"])
        email = outbox.queue_verification_email(
            user.email,
            {
                "verification_url": f"{settings.APP_URL}/verify-email/{token}",
                "expires_in_hours": int(settings.VERIFY_TOKEN_LIFETIME.total_seconds() // 3600),
            },
        )
    deliver_email.delay(str(email.id))
    logger.info("verification_email_queued", user_id=str(user.id), email_id=str(email.id))
    return email


def resend_verification_email(user: User) -> EmailOutbox:
    """Send another verification link, at most once per cooldown period."""
    last_email = (
        EmailOutbox.objects.filter(to_email=user.email, template=EmailTemplate.VERIFICATION)
        .order_by("-created_at")
        .first()
    )
    if last_email is not None:
        elapsed = timezone.now() - last_email.created_at
        if elapsed < RESEND_COOLDOWN:
            remaining = int((RESEND_COOLDOWN - elapsed).total_seconds() + 0.999)
            raise RateLimitError(f"Please wait {remaining} seconds before requesting another email")
    return send_verification_email(user)


def verify_email(token: str) -> User:
    """Confirm the email address behind a verification link."""
    user = User.objects.filter(verification_token_hash=hash_token(token)).first()
    if user is None:
        raise ValidationError("Invalid or expired verification link")
    if user.email_verified:
        raise ValidationError("Email is already verified")
    if user.verification_expired():
        raise ValidationError("Verification link has expired. Please request a new one.")

    user.email_verified = True
    user.email_verified_at = timezone.now()
    user.verification_token_hash = None
    user.verification_expires_at = None
    user.save(
        update_fields=[
            "email_verified",
            "email_verified_at",
            "verification_token_hash",
            "verification_expires_at",
            "updated_at",
        ]
    )
    logger.info("email_verified", user_id=str(user.id))
    return user
