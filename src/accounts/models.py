import typing as t
import uuid
from datetime import datetime

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.utils import timezone


class UserQueryset(models.QuerySet["User"]):
    """Queryset for User."""

    def verified(self) -> t.Self:
        """Users that confirmed their email address."""
        return self.filter(email_verified=True)


class EventsFixerUserManager(UserManager["User"]):
    def get_queryset(self) -> UserQueryset:
        """Get queryset for User."""
        return UserQueryset(self.model, using=self._db)

    def create_user(  # type: ignore[override]
        self, username: str | None = None, email: str | None = None, password: str | None = None, **extra_fields: t.Any
    ) -> "User":
        """Create a user, using the email as username when none is given."""
        username = username or email
        if not username:
            raise ValueError("Users need an email or a username.")
        return super().create_user(username, email, password, **extra_fields)


class User(AbstractUser):
    """A person signing in through Firebase.

    The username mirrors the email address. ``firebase_uid`` links the account to its
    Firebase identity and is filled in the first time the user presents an ID token.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    firebase_uid = models.CharField(max_length=128, unique=True, null=True, blank=True)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True, default="")
    avatar_url = models.URLField(max_length=1024, blank=True, default="")
    email_verified = models.BooleanField(default=False)
    email_verified_at = models.DateTimeField(null=True, blank=True)
    verification_token_hash = models.CharField(max_length=64, unique=True, null=True, blank=True)
    verification_expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EventsFixerUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["email"]

    def __str__(self) -> str:
        return self.email

    @property
    def display_name(self) -> str:
        """Name for greetings and email footers."""
        return self.name or self.get_full_name() or self.email

    def verification_expired(self, now: datetime | None = None) -> bool:
        """Whether the pending verification link has expired."""
        if self.verification_expires_at is None:
            return False
        return self.verification_expires_at < (now or timezone.now())
