import typing as t
from datetime import datetime

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Count, Q
from django.utils import timezone

from common.models import TimeStampedModel

from .organization import Organization, OrganizationMember

if t.TYPE_CHECKING:
    from accounts.models import User


class EventQuerySet(models.QuerySet["Event"]):
    def public(self) -> t.Self:
        """Published events anyone may browse."""
        return self.filter(status=Event.Status.PUBLISHED, visibility=Event.Visibility.PUBLIC)

    def manageable_by(self, user: "User") -> t.Self:
        """Events the user created, or that belong to an organization they own or administer."""
        return self.filter(
            Q(creator=user)
            | Q(
                organization__memberships__user=user,
                organization__memberships__role__in=OrganizationMember.MANAGER_ROLES,
            )
        ).distinct()

    def with_counts(self) -> t.Self:
        """Annotate RSVP and invite totals."""
        return self.annotate(
            yes_count=Count("rsvps", filter=Q(rsvps__response="YES"), distinct=True),
            rsvp_count=Count("rsvps", distinct=True),
            invite_count=Count("invites", distinct=True),
        )


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset."""
        return EventQuerySet(self.model, using=self._db)

    def public(self) -> EventQuerySet:
        return self.get_queryset().public()

    def manageable_by(self, user: "User") -> EventQuerySet:
        return self.get_queryset().manageable_by(user)

    def with_counts(self) -> EventQuerySet:
        return self.get_queryset().with_counts()


class Event(TimeStampedModel):
    class Visibility(models.TextChoices):
        PUBLIC = "PUBLIC", "Public"
        UNLISTED = "UNLISTED", "Unlisted"
        PRIVATE = "PRIVATE", "Private"

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PUBLISHED = "PUBLISHED", "Published"
        CANCELLED = "CANCELLED", "Cancelled"
        COMPLETED = "COMPLETED", "Completed"

    organization = models.ForeignKey(
        Organization, on_delete=models.SET_NULL, null=True, blank=True, related_name="events"
    )
    creator = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="created_events")
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(max_length=5000, null=True, blank=True)
    start_at = models.DateTimeField(db_index=True)
    end_at = models.DateTimeField(null=True, blank=True)
    timezone = models.CharField(max_length=64, default="UTC")
    venue_name = models.CharField(max_length=200, null=True, blank=True)
    address = models.CharField(max_length=500, null=True, blank=True)
    city = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    country = models.CharField(max_length=100, null=True, blank=True)
    latitude = models.FloatField(
        null=True, blank=True, validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        null=True, blank=True, validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )
    visibility = models.CharField(max_length=10, choices=Visibility.choices, default=Visibility.PUBLIC)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.DRAFT)
    cover_image_url = models.URLField(max_length=2048, null=True, blank=True)
    max_attendees = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(10000)]
    )
    published_at = models.DateTimeField(null=True, blank=True)

    # Public page
    config_version = models.PositiveIntegerField(default=1)
    page_config = models.JSONField(null=True, blank=True)
    template_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    theme_preset = models.CharField(max_length=64, null=True, blank=True)
    preview_token_hash = models.CharField(max_length=64, unique=True, null=True, blank=True)
    preview_token_expires_at = models.DateTimeField(null=True, blank=True)

    # Reminders for guests that have not answered yet
    reminder_enabled = models.BooleanField(default=False)
    reminder_days = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(30)]
    )
    rsvp_deadline = models.DateTimeField(null=True, blank=True)

    objects = EventManager()

    class Meta:
        ordering = ["start_at"]
        indexes = [models.Index(fields=["status", "visibility"], name="event_status_visibility_idx")]

    def __str__(self) -> str:
        return self.title

    @property
    def is_published(self) -> bool:
        return self.status == self.Status.PUBLISHED

    @property
    def location_text(self) -> str:
        """Venue and city joined for display, e.g. ``The Barn, Vienna``."""
        return ", ".join(part for part in (self.venue_name, self.city) if part)

    def can_be_managed_by(self, user: t.Any) -> bool:
        """Whether the user is the creator or an owner/admin of the event's organization."""
        if not getattr(user, "is_authenticated", False):
            return False
        if self.creator_id == user.id:
            return True
        if self.organization_id is None:
            return False
        return OrganizationMember.objects.filter(
            organization_id=self.organization_id,
            user_id=user.id,
            role__in=OrganizationMember.MANAGER_ROLES,
        ).exists()

    def has_valid_preview_token(self, now: datetime | None = None) -> bool:
        if not self.preview_token_hash or self.preview_token_expires_at is None:
            return False
        return self.preview_token_expires_at > (now or timezone.now())
