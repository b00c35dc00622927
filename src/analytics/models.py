import uuid

from django.db import models
from django.utils import timezone

from events.models import Event


class AnalyticsEvent(models.Model):
    """Something a visitor did on an event page, reported by the page itself."""

    class Type(models.TextChoices):
        PAGE_VIEW = "page_view", "Page view"
        RSVP_FORM_STARTED = "rsvp_form_started", "RSVP form started"
        RSVP_FORM_ABANDONED = "rsvp_form_abandoned", "RSVP form abandoned"
        RSVP_FORM_SUBMITTED = "rsvp_form_submitted", "RSVP form submitted"
        SECTION_VIEWED = "section_viewed", "Section viewed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="analytics_events")
    type = models.CharField(max_length=32, choices=Type.choices)
    session_id = models.CharField(max_length=128, db_index=True)
    data = models.JSONField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["event", "type"], name="analytics_event_type_idx"),
            models.Index(fields=["event", "timestamp"], name="analytics_event_time_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.type} on {self.event_id}"
