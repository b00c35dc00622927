import hashlib
import hmac
from datetime import datetime
from datetime import timezone as dt_timezone

import structlog
from django.conf import settings
from django.http import HttpResponse
from ninja_extra import ControllerBase, api_controller, route

from common.exceptions import UnauthorizedError
from common.throttling import WebhookThrottle
from notifications import schema
from notifications.enums import EmailStatus
from notifications.service import outbox

logger = structlog.get_logger(__name__)

MAILGUN_EVENT_STATUSES: dict[str, EmailStatus] = {
    "delivered": EmailStatus.DELIVERED,
    "opened": EmailStatus.OPENED,
    "failed": EmailStatus.FAILED,
    "rejected": EmailStatus.FAILED,
    "bounced": EmailStatus.BOUNCED,
    "complained": EmailStatus.BOUNCED,
}


def verify_mailgun_signature(timestamp: str, token: str, signature: str) -> bool:
    """Check the HMAC-SHA256 of ``timestamp + token`` against the webhook signing key.

    Without a signing key every request is accepted, which is only meant for local setups.
    """
    signing_key = settings.MAILGUN_WEBHOOK_SIGNING_KEY
    if not signing_key:
        logger.warning("mailgun_webhook_signature_not_verified")
        return True
    expected = hmac.new(signing_key.encode(), f"{timestamp}{token}".encode(), hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def clean_message_id(message_id: str) -> str:
    """Mailgun wraps message ids in angle brackets."""
    return message_id.strip().removeprefix("<").removesuffix(">")


@api_controller("/webhooks", auth=None, tags=["Webhooks"], throttle=WebhookThrottle())
class WebhookController(ControllerBase):
    @route.post("/mailgun", url_name="mailgun_webhook", response=schema.WebhookResultSchema)
    def mailgun(self, payload: schema.MailgunWebhookSchema) -> schema.WebhookResultSchema:
        """Apply a Mailgun delivery event (delivered, opened, failed, bounced) to the outbox."""
        signature = payload.signature
        if not verify_mailgun_signature(signature.timestamp, signature.token, signature.signature):
            logger.error("mailgun_webhook_invalid_signature")
            raise UnauthorizedError("Invalid signature")

        event_data = payload.event_data
        event = event_data.get("event")
        message_id = (event_data.get("message") or {}).get("headers", {}).get("message-id")
        if not message_id:
            logger.warning("mailgun_webhook_missing_message_id", mailgun_event=event)
            return schema.WebhookResultSchema(status="ignored")

        status = MAILGUN_EVENT_STATUSES.get(event or "")
        if status is None:
            return schema.WebhookResultSchema(status="ignored", event=event)

        timestamp = None
        if event_data.get("timestamp") is not None:
            timestamp = datetime.fromtimestamp(float(event_data["timestamp"]), tz=dt_timezone.utc)
        outbox.update_email_status(clean_message_id(message_id), status, timestamp)
        logger.info("mailgun_webhook_processed", mailgun_event=event)
        return schema.WebhookResultSchema(status="processed", event=event)

    @route.generic("/mailgun", methods=["HEAD"], response={200: None})
    def mailgun_head(self) -> HttpResponse:
        """Mailgun checks the endpoint with HEAD before enabling the webhook."""
        return HttpResponse(status=200)
