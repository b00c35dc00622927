import base64
import json
import typing as t

import pytest
from pytest_django.fixtures import SettingsWrapper

from accounts.models import User
from accounts.service import firebase
from accounts.service.firebase import verify_id_token
from common.exceptions import ConflictError

pytestmark = pytest.mark.django_db


def _unsigned_token(claims: dict[str, t.Any]) -> str:
    def segment(data: dict[str, t.Any]) -> str:
        return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()

    return f"{segment({'alg': 'none', 'typ': 'JWT'})}.{segment(claims)}."


class TestVerifyIdToken:
    def test_emulator_tokens_are_decoded_without_a_signature(self, settings: SettingsWrapper) -> None:
        settings.FIREBASE_AUTH_EMULATOR_HOST = "localhost:9099"

        claims = verify_id_token(_unsigned_token({"user_id": "uid-1", "email": "a@example.com"}))

        assert claims["uid"] == "uid-1"

    def test_email_is_required(self, settings: SettingsWrapper) -> None:
        settings.FIREBASE_AUTH_EMULATOR_HOST = "localhost:9099"
        with pytest.raises(ValueError, match="Token has no email claim"):
            verify_id_token(_unsigned_token({"sub": "uid-1"}))

    def test_issuer_must_match_the_project(self, settings: SettingsWrapper, monkeypatch: pytest.MonkeyPatch) -> None:
        settings.FIREBASE_AUTH_EMULATOR_HOST = ""
        settings.FIREBASE_PROJECT_ID = "eventsfixer"

        def fake_verify(token: str, request: t.Any, audience: str) -> dict[str, t.Any]:
            return {"iss": "https://securetoken.google.com/other", "sub": "uid-1", "email": "a@example.com"}

        monkeypatch.setattr(firebase.id_token, "verify_firebase_token", fake_verify)

        with pytest.raises(ValueError, match="Wrong issuer"):
            verify_id_token("signed-token")


class TestSyncUser:
    def test_creates_new_users(self) -> None:
        user = firebase.sync_user({"uid": "uid-new", "email": "New@Example.com", "name": "Nora"})

        assert user.email == "new@example.com"
        assert user.username == "uid-new"
        assert user.firebase_uid == "uid-new"

    def test_links_existing_accounts_by_email(self) -> None:
        existing = User.objects.create_user(email="legacy@example.com")

        user = firebase.sync_user({"uid": "uid-legacy", "email": "legacy@example.com", "name": "Lea"})

        assert user.pk == existing.pk
        assert user.firebase_uid == "uid-legacy"

    def test_refreshes_the_profile(self, user: User) -> None:
        firebase.sync_user(
            {"uid": user.firebase_uid, "email": user.email, "name": "Renamed", "picture": "https://img.test/a.png"}
        )

        user.refresh_from_db()
        assert user.name == "Renamed"
        assert user.avatar_url == "https://img.test/a.png"

    def test_email_taken_by_another_account(self, user: User, other_user: User) -> None:
        with pytest.raises(ConflictError, match="already used by another account"):
            firebase.sync_user({"uid": user.firebase_uid, "email": other_user.email, "name": "Hannah Host"})

        user.refresh_from_db()
        assert user.email == "host@example.com"
