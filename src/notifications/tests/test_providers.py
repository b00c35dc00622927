import typing as t

import httpx
import pytest
from django.core import mail
from pytest_django.fixtures import SettingsWrapper

from notifications.exceptions import EmailNotConfiguredError, EmailProviderError
from notifications.service import providers
from notifications.service.providers import OutgoingEmail

MESSAGE = OutgoingEmail(to="gina@example.com", subject="Hello", html="<p>Hi</p>", text="Hi", tags=["invite"])


def test_smtp_sends_both_bodies() -> None:
    message_id = providers.send_email(MESSAGE)

    [sent] = mail.outbox
    assert sent.to == ["gina@example.com"]
    assert sent.body == "Hi"
    assert sent.alternatives[0][0] == "<p>Hi</p>"
    assert sent.extra_headers["Message-ID"] == f"<{message_id}>"


class TestMailgun:
    @pytest.fixture(autouse=True)
    def mailgun_settings(self, settings: SettingsWrapper) -> None:
        settings.EMAIL_PROVIDER = "mailgun"
        settings.MAILGUN_API_KEY = "key-test"
        settings.MAILGUN_DOMAIN = "mg.eventsfixer.test"
        settings.MAILGUN_REGION_BASE_URL = "https://api.mailgun.net"

    def _respond(
        self, monkeypatch: pytest.MonkeyPatch, status_code: int, body: dict[str, t.Any]
    ) -> list[dict[str, t.Any]]:
        calls: list[dict[str, t.Any]] = []

        def fake_post(url: str, **kwargs: t.Any) -> httpx.Response:
            calls.append({"url": url, **kwargs})
            return httpx.Response(status_code, json=body, request=httpx.Request("POST", url))

        monkeypatch.setattr(providers.httpx, "post", fake_post)
        return calls

    def test_posts_the_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = self._respond(monkeypatch, 200, {"id": "<20260601.abc@mg.eventsfixer.test>", "message": "Queued"})

        assert providers.send_email(MESSAGE) == "20260601.abc@mg.eventsfixer.test"

        [call] = calls
        assert call["url"] == "https://api.mailgun.net/v3/mg.eventsfixer.test/messages"
        assert call["auth"] == ("api", "key-test")
        assert call["data"]["to"] == "gina@example.com"
        assert call["data"]["o:tag"] == ["invite"]

    def test_error_response(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self._respond(monkeypatch, 401, {"message": "Forbidden"})
        with pytest.raises(EmailProviderError, match="Mailgun error: 401"):
            providers.send_email(MESSAGE)

    def test_unreachable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(url: str, **kwargs: t.Any) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr(providers.httpx, "post", fail)
        with pytest.raises(EmailProviderError, match="Mailgun request failed"):
            providers.send_email(MESSAGE)

    def test_missing_configuration(self, settings: SettingsWrapper) -> None:
        settings.MAILGUN_API_KEY = ""
        with pytest.raises(EmailNotConfiguredError):
            providers.send_email(MESSAGE)
