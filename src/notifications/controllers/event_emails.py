from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import FirebaseAuth
from common.exceptions import AppError, NotFoundError, ValidationError
from common.schema import DataResponse
from common.throttling import ApiThrottle
from events.controllers.base import EventOwnerController
from notifications import schema
from notifications.exceptions import EmailProviderError
from notifications.models import EmailOutbox
from notifications.service import outbox

RECENT_EMAILS_LIMIT = 50
EVENT_PROCESS_BATCH = 10


@api_controller("/events/{event_id}/emails", auth=FirebaseAuth(), tags=["Emails"], throttle=ApiThrottle())
class EventEmailsController(EventOwnerController):
    """Delivery status of the emails sent to an event's invitees."""

    @route.get("", url_name="event_emails", response=DataResponse[schema.EventEmailsSchema])
    def list_emails(self, event_id: UUID) -> dict[str, object]:
        """Per-status totals and the 50 most recent emails."""
        event = self.get_event(event_id)
        emails = EmailOutbox.objects.for_event(event.id).order_by("-created_at")[:RECENT_EMAILS_LIMIT]
        return {"data": {"stats": outbox.get_email_stats(event.id), "emails": list(emails)}}

    @route.post("", url_name="event_emails_action", response=DataResponse[schema.EmailActionResultSchema])
    def email_action(self, event_id: UUID, payload: schema.EmailActionSchema) -> dict[str, object]:
        """Resend a failed or bounced email, or send the event's queued emails now.

        - `resend` requires `email_id`; the copy is sent right away.
        - `process` sends up to 10 queued emails.
        """
        event = self.get_event(event_id)
        if payload.action == "resend":
            if payload.email_id is None:
                raise ValidationError("email_id is required for resend action")
            if not EmailOutbox.objects.for_event(event.id).filter(pk=payload.email_id).exists():
                raise NotFoundError("Email not found")
            new_email = outbox.resend_email(payload.email_id)
            try:
                outbox.process_email(new_email.id)
            except EmailProviderError as e:
                raise AppError(f"Failed to send email: {e}", code="EMAIL_SEND_FAILED", status_code=502) from e
            return {"data": {"message": "Email resent", "email_id": new_email.id}}

        if payload.action == "process":
            result = outbox.process_queued_emails(limit=EVENT_PROCESS_BATCH, event_id=event.id)
            return {
                "data": {
                    "message": f"Processed {result.processed} emails",
                    "processed": result.processed,
                    "errors": result.errors or None,
                }
            }

        raise ValidationError("Invalid action. Use 'resend' or 'process'")
