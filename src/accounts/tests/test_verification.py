from datetime import timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time

from accounts.models import User
from accounts.service import verification
from common.exceptions import RateLimitError, ValidationError
from common.tokens import hash_token
from notifications.enums import EmailStatus, EmailTemplate
from notifications.models import EmailOutbox

pytestmark = pytest.mark.django_db


def _token_from(email: EmailOutbox) -> str:
    return str(email.payload["verification_url"]).rsplit("/", 1)[-1]


class TestSend:
    def test_stores_the_digest_and_sends_the_link(self, user: User) -> None:
        email = verification.send_verification_email(user)

        token = _token_from(email)
        assert email.payload["verification_url"] == f"https://app.eventsfixer.test/verify-email/{token}"
        assert email.payload["expires_in_hours"] == 24
        user.refresh_from_db()
        assert user.verification_token_hash == hash_token(token)
        assert user.verification_expires_at is not None
        email.refresh_from_db()
        assert email.status == EmailStatus.SENT

    def test_already_verified(self, user: User) -> None:
        user.email_verified = True
        user.save()
        with pytest.raises(ValidationError, match="Email is already verified"):
            verification.send_verification_email(user)


class TestResend:
    def test_cooldown(self, user: User) -> None:
        verification.send_verification_email(user)

        with pytest.raises(RateLimitError, match="Please wait 60 seconds"):
            verification.resend_verification_email(user)

    def test_after_the_cooldown(self, user: User) -> None:
        verification.send_verification_email(user)

        with freeze_time(timezone.now() + timedelta(seconds=61)):
            verification.resend_verification_email(user)

        assert EmailOutbox.objects.filter(template=EmailTemplate.VERIFICATION).count() == 2


class TestVerify:
    def test_marks_the_address_verified(self, user: User) -> None:
        token = _token_from(verification.send_verification_email(user))

        verified = verification.verify_email(token)

        assert verified == user
        verified.refresh_from_db()
        assert verified.email_verified is True
        assert verified.email_verified_at is not None
        assert verified.verification_token_hash is None

    def test_old_links_stop_working(self, user: User) -> None:
        old = _token_from(verification.send_verification_email(user))
        verification.send_verification_email(user)

        with pytest.raises(ValidationError, match="Invalid or expired verification link"):
            verification.verify_email(old)

    def test_expired_link(self, user: User) -> None:
        token = _token_from(verification.send_verification_email(user))

        with freeze_time(timezone.now() + timedelta(hours=25)):
            with pytest.raises(ValidationError, match="Verification link has expired"):
                verification.verify_email(token)

    def test_already_verified(self, user: User) -> None:
        token = _token_from(verification.send_verification_email(user))
        User.objects.filter(pk=user.pk).update(email_verified=True)

        with pytest.raises(ValidationError, match="Email is already verified"):
            verification.verify_email(token)
