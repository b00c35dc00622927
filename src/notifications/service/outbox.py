"""The email outbox: queueing, sending and tracking transactional emails."""

import typing as t
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

import structlog
from django.db.models import Count
from django.utils import timezone

from common.exceptions import NotFoundError, ValidationError
from events.models import Invite
from notifications.enums import EmailStatus, EmailTemplate
from notifications.models import EmailOutbox
from notifications.service.providers import OutgoingEmail, send_email
from notifications.service.rendering import render_email

logger = structlog.get_logger(__name__)

Payload = dict[str, t.Any]

RESENDABLE_STATUSES = (EmailStatus.FAILED, EmailStatus.BOUNCED)


def _queue(
    template: EmailTemplate,
    to_email: str,
    subject: str,
    payload: Payload,
    invite: Invite | None = None,
) -> EmailOutbox:
    email = EmailOutbox.objects.create(
        invite=invite,
        template=template,
        to_email=to_email,
        subject=subject,
        payload=payload,
        status=EmailStatus.QUEUED,
    )
    logger.info("email_queued", email_id=str(email.id), template=template)
    return email


def queue_invite_email(invite: Invite, payload: Payload) -> EmailOutbox:
    """Queue the invitation with its RSVP link."""
    return _queue(
        EmailTemplate.INVITE, invite.email, f"You're invited to {payload['event_title']}", payload, invite
    )


def queue_confirmation_email(invite: Invite | None, to_email: str, payload: Payload) -> EmailOutbox:
    """Queue the receipt of an RSVP. The subject depends on the answer."""
    if payload.get("response") == "YES":
        subject = f"You're confirmed for {payload['event_title']}!"
    else:
        subject = f"RSVP received for {payload['event_title']}"
    return _queue(EmailTemplate.CONFIRMATION, to_email, subject, payload, invite)


def queue_reminder_email(invite: Invite, to_email: str, payload: Payload) -> EmailOutbox:
    """Queue the day-before reminder for a confirmed guest."""
    return _queue(
        EmailTemplate.REMINDER, to_email, f"Reminder: {payload['event_title']} is tomorrow!", payload, invite
    )


def queue_verification_email(to_email: str, payload: Payload) -> EmailOutbox:
    """Queue an email address verification link."""
    return _queue(EmailTemplate.VERIFICATION, to_email, "Verify your email address for EventsFixer", payload)


def queue_no_response_reminder_email(invite: Invite, payload: Payload) -> EmailOutbox:
    """Queue a nudge for an invitee that has not answered yet."""
    return _queue(
        EmailTemplate.NO_RESPONSE_REMINDER,
        invite.email,
        f"Reminder: Please RSVP for {payload['event_title']}",
        payload,
        invite,
    )


def queue_update_email(invite: Invite, to_email: str, payload: Payload) -> EmailOutbox:
    """Queue a notice that the date or venue of an event changed."""
    return _queue(EmailTemplate.UPDATE, to_email, f"Update: {payload['event_title']} has changed", payload, invite)


def queue_cancellation_email(invite: Invite, to_email: str, payload: Payload) -> EmailOutbox:
    """Queue a notice that an event was cancelled."""
    return _queue(
        EmailTemplate.CANCELLATION, to_email, f"Cancelled: {payload['event_title']}", payload, invite
    )


def process_email(email_id: UUID | str) -> None:
    """Render and send a queued email.

    Rows that are not ``QUEUED`` are left alone, so a row is sent at most once even when
    several workers pick it up. A successful invite email also marks the invite as sent.

    Raises:
        Exception: whatever rendering or sending raised, after the row was marked ``FAILED``.
    """
    claimed = EmailOutbox.objects.filter(pk=email_id, status=EmailStatus.QUEUED).update(
        status=EmailStatus.SENDING, updated_at=timezone.now()
    )
    if not claimed:
        logger.debug("email_not_queued", email_id=str(email_id))
        return

    email = EmailOutbox.objects.get(pk=email_id)
    try:
        rendered = render_email(email)
        provider_message_id = send_email(
            OutgoingEmail(
                to=email.to_email,
                subject=email.subject,
                html=rendered.html,
                text=rendered.text,
                tags=[email.template.lower()],
            )
        )
    except Exception as e:
        email.status = EmailStatus.FAILED
        email.error = str(e) or e.__class__.__name__
        email.save(update_fields=["status", "error", "updated_at"])
        logger.error("email_send_failed", email_id=str(email.id), template=email.template, error=str(e))
        raise

    now = timezone.now()
    email.status = EmailStatus.SENT
    email.provider_message_id = provider_message_id
    email.sent_at = now
    email.error = None
    email.save(update_fields=["status", "provider_message_id", "sent_at", "error", "updated_at"])

    if email.invite_id and email.template == EmailTemplate.INVITE:
        # An answered or opened invite keeps its more advanced status.
        Invite.objects.filter(pk=email.invite_id).exclude(
            status__in=[Invite.Status.OPENED, Invite.Status.RESPONDED]
        ).update(status=Invite.Status.SENT, sent_at=now, updated_at=now)

    logger.info("email_sent", email_id=str(email.id), template=email.template)


@dataclass
class BatchResult:
    processed: int = 0
    errors: list[str] = field(default_factory=list)


def process_queued_emails(limit: int = 10, event_id: UUID | str | None = None) -> BatchResult:
    """Send up to ``limit`` queued emails, oldest first.

    A failing email does not stop the batch: its error is collected and the next one is sent.
    """
    queryset = EmailOutbox.objects.queued()
    if event_id is not None:
        queryset = queryset.for_event(event_id)

    result = BatchResult()
    for email_id in list(queryset.values_list("id", flat=True)[:limit]):
        try:
            process_email(email_id)
        except Exception as e:
            result.errors.append(f"{email_id}: {e}")
            continue
        result.processed += 1
    return result


def update_email_status(
    provider_message_id: str, status: EmailStatus, timestamp: datetime | None = None
) -> int:
    """Apply a delivery event reported by the provider and return the number of rows updated.

    Bounces mark the related invite ``BOUNCED``; an opened invite email marks the invite
    ``OPENED`` unless the guest has already answered.
    """
    updates: dict[str, t.Any] = {"status": status, "updated_at": timezone.now()}
    if status == EmailStatus.DELIVERED and timestamp:
        updates["delivered_at"] = timestamp
    elif status == EmailStatus.OPENED and timestamp:
        updates["opened_at"] = timestamp

    emails = EmailOutbox.objects.filter(provider_message_id=provider_message_id)
    updated = emails.update(**updates)
    if not updated:
        logger.info("email_status_unmatched", provider_message_id=provider_message_id, status=status)
        return 0

    email = emails.first()
    if email is not None and email.invite_id:
        invites = Invite.objects.filter(pk=email.invite_id)
        if status == EmailStatus.BOUNCED:
            invites.update(status=Invite.Status.BOUNCED, updated_at=timezone.now())
        elif status == EmailStatus.OPENED and email.template == EmailTemplate.INVITE:
            invites.exclude(status=Invite.Status.RESPONDED).update(
                status=Invite.Status.OPENED, opened_at=timestamp or timezone.now(), updated_at=timezone.now()
            )

    logger.info("email_status_updated", provider_message_id=provider_message_id, status=status, count=updated)
    return updated


def get_email_stats(event_id: UUID | str) -> dict[str, int]:
    """Count the emails sent to an event's invitees by delivery status.

    ``SENDING`` rows count as sent.
    """
    stats = {"total": 0, "queued": 0, "sent": 0, "delivered": 0, "opened": 0, "failed": 0, "bounced": 0}
    rows = EmailOutbox.objects.for_event(event_id).values("status").annotate(count=Count("id")).order_by()
    for row in rows:
        count = row["count"]
        stats["total"] += count
        key = "sent" if row["status"] == EmailStatus.SENDING else row["status"].lower()
        stats[key] += count
    return stats


def resend_email(email_id: UUID | str) -> EmailOutbox:
    """Queue a copy of a failed or bounced email. The original row is kept as it is."""
    email = EmailOutbox.objects.filter(pk=email_id).first()
    if email is None:
        raise NotFoundError("Email not found")
    if email.status not in RESENDABLE_STATUSES:
        raise ValidationError("Can only resend failed or bounced emails")

    new_email = EmailOutbox.objects.create(
        invite_id=email.invite_id,
        template=email.template,
        to_email=email.to_email,
        subject=email.subject,
        payload=email.payload or {},
        status=EmailStatus.QUEUED,
    )
    logger.info("email_resend_queued", email_id=str(new_email.id), original_email_id=str(email.id))
    return new_email
