import logging
from datetime import timedelta

import httpx
import pytest

from taskboard.models.user import User
from taskboard.services import mail_client, notification_service
from taskboard.services.mail_client import MailMessage
from taskboard.utils.helpers import utcnow

LOGGER_NAME = "taskboard.services.notification_service"


@pytest.fixture
def mail_enabled(monkeypatch):
    monkeypatch.setattr(mail_client, "is_mail_configured", lambda: True)


def _message():
    return MailMessage(to="alice@example.com", subject="Hello", body="Hi", user_id=42)


def test_deliver_succeeds_first_try(monkeypatch, mail_enabled):
    sent = []
    monkeypatch.setattr(mail_client, "send_mail", lambda message, timeout=None: sent.append((message, timeout)))
    assert notification_service.deliver(_message(), "welcome") is True
    assert len(sent) == 1
    assert sent[0][1] == 30.0


def test_deliver_retries_then_succeeds(monkeypatch, mail_enabled):
    calls = []

    def flaky(message, timeout=None):
        calls.append(message)
        if len(calls) < 3:
            raise httpx.ConnectError("mail server down")

    monkeypatch.setattr(mail_client, "send_mail", flaky)
    assert notification_service.deliver(_message(), "welcome", sleep=lambda s: None) is True
    assert len(calls) == 3


def test_deliver_gives_up_after_max_attempts(monkeypatch, mail_enabled, caplog):
    calls = []

    def always_fail(message, timeout=None):
        calls.append(message)
        raise httpx.ConnectError("mail server down")

    monkeypatch.setattr(mail_client, "send_mail", always_fail)
    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        assert notification_service.deliver(_message(), "welcome", sleep=lambda s: None) is False

    assert len(calls) == 3
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "failed permanently" in errors[0].getMessage()


def test_deliver_stops_after_retry_deadline(monkeypatch, mail_enabled, caplog):
    calls = []
    monkeypatch.setattr(mail_client, "send_mail", lambda message, timeout=None: calls.append(message))
    stale = utcnow() - timedelta(minutes=10)
    with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
        assert notification_service.deliver(_message(), "welcome", enqueued_at=stale) is False
    assert calls == []
    assert "deadline" in caplog.records[-1].getMessage()


def test_deliver_skips_when_not_configured(monkeypatch):
    calls = []
    monkeypatch.setattr(mail_client, "is_mail_configured", lambda: False)
    monkeypatch.setattr(mail_client, "send_mail", lambda message, timeout=None: calls.append(message))
    assert notification_service.deliver(_message(), "welcome") is False
    assert calls == []


def test_registration_sends_welcome_mail(client, monkeypatch, mail_enabled):
    sent = []
    monkeypatch.setattr(mail_client, "send_mail", lambda message, timeout=None: sent.append(message))
    resp = client.post("/api/auth/register", json={
        "name": "Alice", "email": "alice@example.com", "password": "password123",
    })
    assert resp.status_code == 201
    assert len(sent) == 1
    assert sent[0].to == "alice@example.com"
    assert "Alice" in sent[0].body


def test_registration_survives_mail_failure(client, db, monkeypatch, mail_enabled):
    def always_fail(message, timeout=None):
        raise httpx.ConnectError("mail server down")

    monkeypatch.setattr(mail_client, "send_mail", always_fail)
    resp = client.post("/api/auth/register", json={
        "name": "Alice", "email": "alice@example.com", "password": "password123",
    })
    assert resp.status_code == 201
    assert db.query(User).count() == 1
    token = resp.json()["data"]["token"]
    assert client.get("/api/user", headers={"Authorization": f"Bearer {token}"}).status_code == 200


def test_password_reset_message_contains_link():
    user = User(id=7, name="Alice", email="alice@example.com")
    message = notification_service.build_password_reset_message(user, "abc.def")
    assert message.to == "alice@example.com"
    assert message.user_id == 7
    assert "email=alice%40example.com" in message.body
    assert "token=abc.def" in message.body


def test_send_mail_posts_json(monkeypatch):
    captured = {}

    class FakeResponse:
        def raise_for_status(self):
            return None

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse()

    monkeypatch.setattr(mail_client.settings, "MAIL_API_URL", "https://mail.example.com/send")
    monkeypatch.setattr(mail_client.settings, "MAIL_API_KEY", "secret")
    monkeypatch.setattr(mail_client.httpx, "post", fake_post)
    mail_client.send_mail(_message(), timeout=5)

    assert captured["url"] == "https://mail.example.com/send"
    assert captured["json"]["to"] == ["alice@example.com"]
    assert captured["headers"]["Authorization"] == "Bearer secret"
    assert captured["timeout"] == 5


def test_delivery_logs_user_id_not_address(monkeypatch, mail_enabled, caplog):
    def always_fail(message, timeout=None):
        raise httpx.ConnectError("mail server down")

    monkeypatch.setattr(mail_client, "send_mail", always_fail)
    with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
        notification_service.deliver(_message(), "welcome", sleep=lambda s: None)

    assert caplog.records
    for record in caplog.records:
        text = record.getMessage()
        assert "alice@example.com" not in text
        assert "user_id=42" in text


def test_registration_queue_log_has_no_address(client, caplog):
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        resp = client.post("/api/auth/register", json={
            "name": "Alice", "email": "alice@example.com", "password": "password123",
        })
    assert resp.status_code == 201
    user_id = resp.json()["data"]["user"]["id"]
    messages = [r.getMessage() for r in caplog.records]
    assert f"welcome notification queued for user_id={user_id}" in messages
    assert not any("alice@example.com" in m for m in messages)
