import typing as t
from datetime import datetime

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q, Sum
from django.utils import timezone

from common.models import TimeStampedModel

from .event import Event


class InviteQuerySet(models.QuerySet["Invite"]):
    def awaiting_response(self) -> "InviteQuerySet":
        """Invites that went out but were not answered yet."""
        return self.filter(status__in=[Invite.Status.SENT, Invite.Status.OPENED], rsvp__isnull=True)


class Invite(TimeStampedModel):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        SENT = "SENT", "Sent"
        OPENED = "OPENED", "Opened"
        RESPONDED = "RESPONDED", "Responded"
        BOUNCED = "BOUNCED", "Bounced"
        EXPIRED = "EXPIRED", "Expired"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="invites")
    email = models.EmailField(db_index=True)
    name = models.CharField(max_length=200, null=True, blank=True)
    token_hash = models.CharField(max_length=64, unique=True)
    plus_ones_allowed = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(10)])
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    sent_at = models.DateTimeField(null=True, blank=True)
    opened_at = models.DateTimeField(null=True, blank=True)

    objects = InviteQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "email"], name="unique_invite_email_per_event"),
        ]

    def __str__(self) -> str:
        return f"{self.email} -> {self.event_id}"

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Invite emails are stored lowercase."""
        self.email = self.email.lower()
        super().save(*args, **kwargs)

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at is not None and self.expires_at < (now or timezone.now())


class RSVPQuerySet(models.QuerySet["RSVP"]):
    def attending(self) -> "RSVPQuerySet":
        return self.filter(response=RSVP.Response.YES)

    def attending_guest_total(self, exclude_pk: object = None) -> int:
        """Sum of guest counts over YES answers, optionally leaving one RSVP out."""
        qs = self.attending()
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.aggregate(total=Sum("guest_count"))["total"] or 0


class RSVP(TimeStampedModel):
    class Response(models.TextChoices):
        YES = "YES", "Yes"
        NO = "NO", "No"
        MAYBE = "MAYBE", "Maybe"

    invite = models.OneToOneField(Invite, on_delete=models.SET_NULL, null=True, blank=True, related_name="rsvp")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="rsvps")
    response = models.CharField(max_length=5, choices=Response.choices)
    guest_name = models.CharField(max_length=200)
    guest_email = models.EmailField(null=True, blank=True)
    guest_count = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1), MaxValueValidator(11)])
    notes = models.TextField(max_length=1000, null=True, blank=True)
    responded_at = models.DateTimeField(default=timezone.now)

    objects = RSVPQuerySet.as_manager()

    class Meta:
        ordering = ["-responded_at"]
        verbose_name = "RSVP"
        indexes = [models.Index(fields=["event", "response"], name="rsvp_event_response_idx")]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "guest_email"],
                condition=Q(invite__isnull=True, guest_email__isnull=False),
                name="unique_public_rsvp_email_per_event",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.guest_name}: {self.response}"
