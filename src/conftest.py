"""Fixtures shared by every app's tests."""

import typing as t
import uuid
from datetime import datetime, time, timedelta
from pathlib import Path

import faker
import pytest
from django.test.client import Client
from django.utils import timezone
from pytest import MonkeyPatch

from accounts.models import User
from common.rate_limit import rate_limiter
from eventsfixer.celery import app as celery_app


def _fake_verify_id_token(token: str) -> dict[str, t.Any]:
    """Accept a user's ``firebase_uid`` as their ID token."""
    user = User.objects.filter(firebase_uid=token).first()
    if user is None:
        raise ValueError("Invalid token.")
    return {"uid": token, "email": user.email, "name": user.name, "picture": user.avatar_url}


@pytest.fixture(autouse=True)
def fake_firebase(monkeypatch: MonkeyPatch) -> None:
    """Tests authenticate with ``Bearer <firebase_uid>`` instead of real Firebase tokens."""
    monkeypatch.setattr("accounts.service.firebase.verify_id_token", _fake_verify_id_token)


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Run Celery tasks synchronously so their side effects can be asserted."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = False
    celery_app.conf.update(task_always_eager=True, task_eager_propagates=False)


@pytest.fixture(autouse=True)
def local_email(settings: t.Any) -> None:
    """Send emails through Django's locmem backend instead of Mailgun."""
    settings.EMAIL_PROVIDER = "smtp"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.MAIL_FROM = "EventsFixer <noreply@eventsfixer.test>"
    settings.BASE_URL = "https://eventsfixer.test"
    settings.APP_URL = "https://app.eventsfixer.test"


@pytest.fixture(autouse=True)
def media_storage(settings: t.Any, tmp_path: Path) -> Path:
    """Uploaded images land in a temporary directory."""
    settings.MEDIA_ROOT = str(tmp_path / "media")
    settings.MEDIA_URL = "/media/"
    return tmp_path / "media"


@pytest.fixture(autouse=True)
def reset_rate_limits() -> t.Iterator[None]:
    """Every test starts with fresh rate limit windows."""
    rate_limiter.reset()
    yield
    rate_limiter.reset()


class UserFactory:
    """Factory for creating Firebase-linked users."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> User:
        email = kwargs.pop("email", f"{uuid.uuid4().hex[:10]}@user.test")
        name = kwargs.pop("name", self.fake.name())
        firebase_uid = kwargs.pop("firebase_uid", f"uid-{uuid.uuid4().hex}")
        return User.objects.create_user(email=email, name=name, firebase_uid=firebase_uid, **kwargs)

    def __call__(self, **kwargs: t.Any) -> User:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> UserFactory:
    return UserFactory()


@pytest.fixture
def user(user_factory: UserFactory) -> User:
    return user_factory(email="host@example.com", name="Hannah Host")


@pytest.fixture
def other_user(user_factory: UserFactory) -> User:
    return user_factory(email="other@example.com", name="Oscar Other")


def auth_client(user: User) -> Client:
    """A test client that signs every request as ``user``."""
    return Client(HTTP_AUTHORIZATION=f"Bearer {user.firebase_uid}")


@pytest.fixture
def user_client(user: User) -> Client:
    return auth_client(user)


@pytest.fixture
def other_client(other_user: User) -> Client:
    return auth_client(other_user)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine((today + timedelta(days=7)).date(), noon),
        timezone.get_current_timezone(),
    )
