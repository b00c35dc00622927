import time
import typing as t

import structlog
from django.conf import settings
from django.http import HttpRequest
from django.utils import timezone
from ninja_extra import ControllerBase, api_controller, route

from common.exceptions import AppError, UnauthorizedError
from notifications import schema
from notifications.service import outbox, reminders
from notifications.tasks import deliver_email

logger = structlog.get_logger(__name__)


def require_cron_secret(request: HttpRequest) -> None:
    """Only external schedulers holding ``CRON_SECRET`` may trigger the jobs."""
    secret = settings.CRON_SECRET
    if not secret:
        logger.error("cron_secret_not_configured")
        raise AppError("Server configuration error", code="CONFIGURATION_ERROR", status_code=500)
    if request.headers.get("Authorization") != f"Bearer {secret}":
        logger.warning("cron_authentication_failed", has_auth_header="Authorization" in request.headers)
        raise UnauthorizedError()


def _finish(job: str, started: float, **result: t.Any) -> schema.CronResultSchema:
    duration = f"{int((time.monotonic() - started) * 1000)}ms"
    logger.info("cron_job_completed", job=job, duration=duration, **result)
    return schema.CronResultSchema(duration=duration, timestamp=timezone.now(), **result)


@api_controller("/cron", auth=None, tags=["Cron"])
class CronController(ControllerBase):
    """Jobs for external schedulers. Celery beat runs the same jobs on its own schedule."""

    @route.get("/process-emails", url_name="cron_process_emails", response=schema.CronResultSchema)
    def process_emails(self) -> schema.CronResultSchema:
        """Send up to 50 queued emails."""
        require_cron_secret(self.context.request)  # type: ignore[union-attr]
        started = time.monotonic()
        result = outbox.process_queued_emails(limit=50)
        return _finish("process_emails", started, processed=result.processed, errors=result.errors or None)

    @route.get("/send-reminders", url_name="cron_send_reminders", response=schema.CronResultSchema)
    def send_reminders(self) -> schema.CronResultSchema:
        """Queue reminders for guests attending an event tomorrow."""
        require_cron_secret(self.context.request)  # type: ignore[union-attr]
        started = time.monotonic()
        run = reminders.queue_event_reminders()
        return _finish(
            "send_reminders",
            started,
            events_processed=run.events_processed,
            reminders_queued=run.reminders_queued,
            errors=run.errors or None,
        )

    @route.get(
        "/send-no-response-reminders",
        url_name="cron_send_no_response_reminders",
        response=schema.CronResultSchema,
    )
    def send_no_response_reminders(self) -> schema.CronResultSchema:
        """Remind invitees that have not answered yet."""
        require_cron_secret(self.context.request)  # type: ignore[union-attr]
        started = time.monotonic()
        run = reminders.queue_no_response_reminders()
        for email_id in run.email_ids:
            deliver_email.delay(email_id)
        return _finish(
            "send_no_response_reminders",
            started,
            message=f"Queued {run.reminders_queued} reminder emails",
            events_processed=run.events_processed,
            reminders_queued=run.reminders_queued,
            errors=run.errors or None,
        )
