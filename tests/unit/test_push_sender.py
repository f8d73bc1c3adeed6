from __future__ import annotations

import time

import pytest
from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from chat_relay.core.exceptions import InvalidTokenError, PushSendError
from chat_relay.core.push_sender import FirebasePushSender, NullPushSender, PlatformOptions, PushPayload, build_fcm_message


def _payload() -> PushPayload:
    return PushPayload(token="tok123", title="Alice", body="hi", data={"chatId": "c1", "type": "chat"})


def _sender(**kwargs) -> FirebasePushSender:
    kwargs.setdefault("backoff_seconds", 0)
    return FirebasePushSender(object(), **kwargs)


def test_build_fcm_message_carries_notification_data_and_platform_blocks():
    message = build_fcm_message(_payload(), PlatformOptions(android_channel_id="chat_messages", android_icon="ic_test"))

    assert message.token == "tok123"
    assert message.notification.title == "Alice"
    assert message.notification.body == "hi"
    assert message.data == {"chatId": "c1", "type": "chat"}
    assert message.android.priority == "high"
    assert message.android.notification.channel_id == "chat_messages"
    assert message.android.notification.icon == "ic_test"
    assert message.apns.payload.aps.badge == 1
    assert message.apns.payload.aps.alert.title == "Alice"


@pytest.mark.asyncio
async def test_send_returns_provider_message_id(monkeypatch):
    calls = []

    def _send(message, app=None):
        calls.append(message)
        return "projects/p/messages/1"

    monkeypatch.setattr("chat_relay.core.push_sender.messaging.send", _send)

    assert await _sender().send(_payload()) == "projects/p/messages/1"
    assert calls[0].token == "tok123"


@pytest.mark.asyncio
async def test_unregistered_token_raises_invalid_token_without_retry(monkeypatch):
    attempts = {"count": 0}

    def _send(message, app=None):
        attempts["count"] += 1
        raise messaging.UnregisteredError("Requested entity was not found.")

    monkeypatch.setattr("chat_relay.core.push_sender.messaging.send", _send)

    with pytest.raises(InvalidTokenError) as exc_info:
        await _sender(max_attempts=3).send(_payload())

    assert exc_info.value.code == "TOKEN_INVALID"
    assert attempts["count"] == 1


@pytest.mark.asyncio
async def test_transient_failure_is_retried_then_succeeds(monkeypatch):
    attempts = {"count": 0}

    def _send(message, app=None):
        attempts["count"] += 1
        if attempts["count"] < 3:
            raise firebase_exceptions.UnavailableError("backend unavailable")
        return "projects/p/messages/3"

    monkeypatch.setattr("chat_relay.core.push_sender.messaging.send", _send)

    assert await _sender(max_attempts=3).send(_payload()) == "projects/p/messages/3"
    assert attempts["count"] == 3


@pytest.mark.asyncio
async def test_transient_failure_exhausts_attempts(monkeypatch):
    attempts = {"count": 0}

    def _send(message, app=None):
        attempts["count"] += 1
        raise firebase_exceptions.UnavailableError("backend unavailable")

    monkeypatch.setattr("chat_relay.core.push_sender.messaging.send", _send)

    with pytest.raises(PushSendError) as exc_info:
        await _sender(max_attempts=2).send(_payload())

    assert attempts["count"] == 2
    assert exc_info.value.code == "UNAVAILABLE"
    assert not isinstance(exc_info.value, InvalidTokenError)


@pytest.mark.asyncio
async def test_non_transient_firebase_error_is_not_retried(monkeypatch):
    attempts = {"count": 0}

    def _send(message, app=None):
        attempts["count"] += 1
        raise firebase_exceptions.InvalidArgumentError("bad payload")

    monkeypatch.setattr("chat_relay.core.push_sender.messaging.send", _send)

    with pytest.raises(PushSendError) as exc_info:
        await _sender(max_attempts=3).send(_payload())

    assert attempts["count"] == 1
    assert exc_info.value.code == "INVALID_ARGUMENT"
    assert "bad payload" in exc_info.value.detail


@pytest.mark.asyncio
async def test_null_sender_sends_nothing():
    sender = NullPushSender()
    assert sender.enabled is False
    assert await sender.send(_payload()) is None


@pytest.mark.asyncio
async def test_timed_out_send_is_not_retried(monkeypatch):
    attempts = {"count": 0}

    def _send(message, app=None):
        attempts["count"] += 1
        time.sleep(0.3)
        return "projects/p/messages/late"

    monkeypatch.setattr("chat_relay.core.push_sender.messaging.send", _send)

    with pytest.raises(PushSendError) as exc_info:
        await _sender(max_attempts=3, timeout_seconds=0.05).send(_payload())

    assert exc_info.value.code == "TIMEOUT"
    assert attempts["count"] == 1
