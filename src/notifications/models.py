import typing as t
from uuid import UUID

from django.db import models

from common.models import TimeStampedModel
from notifications.enums import EmailStatus, EmailTemplate


class EmailOutboxQuerySet(models.QuerySet["EmailOutbox"]):
    def queued(self) -> t.Self:
        """Rows waiting to be sent, oldest first."""
        return self.filter(status=EmailStatus.QUEUED).order_by("created_at")

    def for_event(self, event_id: UUID | str) -> t.Self:
        """Emails addressed to the invitees of an event."""
        return self.filter(invite__event_id=event_id)


class EmailOutbox(TimeStampedModel):
    """A transactional email, from queueing to delivery.

    Rows move ``QUEUED -> SENDING -> SENT | FAILED``. Provider webhooks later move sent
    rows to ``DELIVERED``, ``OPENED`` or ``BOUNCED``. A failed row is never retried in
    place: resending creates a new row.
    """

    invite = models.ForeignKey(
        "events.Invite", on_delete=models.SET_NULL, null=True, blank=True, related_name="emails"
    )
    template = models.CharField(max_length=32, choices=EmailTemplate.choices)
    to_email = models.EmailField()
    subject = models.CharField(max_length=255)
    payload = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=10, choices=EmailStatus.choices, default=EmailStatus.QUEUED, db_index=True)
    provider_message_id = models.CharField(max_length=255, null=True, blank=True, db_index=True)
    error = models.TextField(null=True, blank=True)
    scheduled_for = models.DateTimeField(null=True, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    opened_at = models.DateTimeField(null=True, blank=True)

    objects = EmailOutboxQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Email"
        verbose_name_plural = "Email Outbox"

    def __str__(self) -> str:
        return f"{self.template} to {self.to_email} ({self.status})"
