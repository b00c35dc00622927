"""Enums for the email outbox."""

from django.db.models import TextChoices


class EmailTemplate(TextChoices):
    """The transactional emails the platform sends.

    Each value has a matching pair of templates under ``notifications/email/``.
    """

    INVITE = "INVITE", "Invite"
    CONFIRMATION = "CONFIRMATION", "RSVP confirmation"
    REMINDER = "REMINDER", "Event reminder"
    UPDATE = "UPDATE", "Event update"
    CANCELLATION = "CANCELLATION", "Event cancellation"
    VERIFICATION = "VERIFICATION", "Email verification"
    NO_RESPONSE_REMINDER = "NO_RESPONSE_REMINDER", "No-response reminder"


class EmailStatus(TextChoices):
    QUEUED = "QUEUED", "Queued"
    SENDING = "SENDING", "Sending"
    SENT = "SENT", "Sent"
    DELIVERED = "DELIVERED", "Delivered"
    OPENED = "OPENED", "Opened"
    FAILED = "FAILED", "Failed"
    BOUNCED = "BOUNCED", "Bounced"
