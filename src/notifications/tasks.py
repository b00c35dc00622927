"""Celery tasks for email delivery and scheduled reminders."""

import typing as t

import structlog
from celery import shared_task

from notifications.exceptions import EmailProviderError
from notifications.service import outbox, reminders

logger = structlog.get_logger(__name__)


@shared_task(bind=True, max_retries=0)
def deliver_email(self: t.Any, email_id: str) -> None:
    """Send a single queued outbox row right away.

    A provider failure leaves the row FAILED; it can be resent from the event emails endpoint.
    """
    try:
        outbox.process_email(email_id)
    except EmailProviderError as e:
        logger.warning("email_delivery_failed", email_id=email_id, error=str(e))


@shared_task
def process_queued_emails_task(limit: int = 50) -> dict[str, t.Any]:
    """Drain the outbox, oldest first."""
    result = outbox.process_queued_emails(limit=limit)
    return {"processed": result.processed, "errors": result.errors}


@shared_task
def send_event_reminders() -> dict[str, t.Any]:
    """Queue tomorrow's event reminders. The outbox job sends them."""
    run = reminders.queue_event_reminders()
    return {
        "events_processed": run.events_processed,
        "reminders_queued": run.reminders_queued,
        "errors": run.errors,
    }


@shared_task
def send_no_response_reminders() -> dict[str, t.Any]:
    """Queue the due no-response reminders and deliver them immediately."""
    run = reminders.queue_no_response_reminders()
    for email_id in run.email_ids:
        deliver_email.delay(email_id)
    return {
        "events_processed": run.events_processed,
        "reminders_queued": run.reminders_queued,
        "errors": run.errors,
    }
