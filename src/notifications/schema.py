"""Schemas for the email outbox API."""

import typing as t
from datetime import datetime
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from notifications.models import EmailOutbox


class EmailSchema(ModelSchema):
    id: UUID

    class Meta:
        model = EmailOutbox
        fields = [
            "template",
            "to_email",
            "subject",
            "status",
            "sent_at",
            "delivered_at",
            "opened_at",
            "error",
            "created_at",
        ]


class EmailStatsSchema(Schema):
    total: int = 0
    queued: int = 0
    sent: int = 0
    delivered: int = 0
    opened: int = 0
    failed: int = 0
    bounced: int = 0


class EventEmailsSchema(Schema):
    stats: EmailStatsSchema
    emails: list[EmailSchema]


class EmailActionSchema(Schema):
    """``resend`` needs ``email_id``; ``process`` sends the event's queued emails."""

    action: str
    email_id: UUID | None = None


class EmailActionResultSchema(Schema):
    message: str
    email_id: UUID | None = None
    processed: int | None = None
    errors: list[str] | None = None


class MailgunSignatureSchema(Schema):
    timestamp: str
    token: str
    signature: str


class MailgunWebhookSchema(Schema):
    """The JSON body Mailgun posts for tracking events."""

    signature: MailgunSignatureSchema
    event_data: dict[str, t.Any] = Field(default_factory=dict, alias="event-data")


class WebhookResultSchema(Schema):
    status: t.Literal["processed", "ignored"]
    event: str | None = None


class CronResultSchema(Schema):
    success: bool = True
    message: str | None = None
    processed: int | None = None
    events_processed: int | None = None
    reminders_queued: int | None = None
    errors: list[str] | None = None
    duration: str
    timestamp: datetime
