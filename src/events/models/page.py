from django.conf import settings
from django.db import models

from common.models import TimeStampedModel

from .event import Event


class PageTemplate(models.Model):
    """A starting point for an event's public page.

    Templates are addressed by a stable string key (e.g. ``wedding_v1``) that events
    store in ``Event.template_id``.
    """

    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=64, db_index=True)
    description = models.TextField(null=True, blank=True)
    preview_url = models.URLField(max_length=2048, null=True, blank=True)
    defaults = models.JSONField(default=dict, blank=True)
    schema_version = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["category", "name"]

    def __str__(self) -> str:
        return self.name


class EventPageVersion(TimeStampedModel):
    """A snapshot of an event's page config, kept for history and rollback."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="page_versions")
    page_config = models.JSONField()
    config_version = models.PositiveIntegerField()
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["event", "-created_at"], name="page_version_event_created_idx")]

    def __str__(self) -> str:
        return f"{self.event_id} v{self.config_version}"


class MediaAsset(TimeStampedModel):
    class Kind(models.TextChoices):
        HERO = "HERO", "Hero"
        GALLERY = "GALLERY", "Gallery"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="media_assets")
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="media_assets")
    kind = models.CharField(max_length=10, choices=Kind.choices)
    bucket = models.CharField(max_length=64)
    path = models.CharField(max_length=512)
    public_url = models.URLField(max_length=2048, null=True, blank=True)
    mime_type = models.CharField(max_length=64)
    size_bytes = models.PositiveIntegerField()
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    alt = models.CharField(max_length=200, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["event", "kind"], name="media_asset_event_kind_idx")]

    def __str__(self) -> str:
        return self.path
