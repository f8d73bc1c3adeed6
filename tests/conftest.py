"""Shared fixtures: the relay app wired to in-memory collaborators."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from chat_relay.core.config import Settings
from chat_relay.core.exceptions import ProfileStoreError
from chat_relay.core.push_sender import PushPayload
from chat_relay.core.startup import Integrations, degraded_integrations
from chat_relay.main import create_app
from chat_relay.models.user_profile import DEFAULT_DEVICE_TYPE, UserProfile


class FakeProfileStore:
    """Dict-backed store with the same merge semantics as the Firestore one."""

    enabled = True

    def __init__(self, profiles: dict[str, dict[str, Any]] | None = None) -> None:
        self.profiles: dict[str, dict[str, Any]] = profiles or {}
        self.error: ProfileStoreError | None = None

    async def get_profile(self, user_id: str) -> UserProfile | None:
        if self.error:
            raise self.error
        doc = self.profiles.get(user_id)
        return None if doc is None else UserProfile.from_document(user_id, doc)

    async def save_push_token(self, user_id: str, push_token: str, device_type: str = DEFAULT_DEVICE_TYPE, mark_online: bool = True) -> None:
        if self.error:
            raise self.error
        now = datetime.now(timezone.utc)
        doc = self.profiles.setdefault(user_id, {})
        doc.update({"fcmToken": push_token, "deviceType": device_type, "lastTokenUpdate": now, "lastActive": now})
        if mark_online:
            doc["isOnline"] = True

    async def save_presence(self, user_id: str, is_online: bool, active_chat_id: str | None) -> None:
        if self.error:
            raise self.error
        doc = self.profiles.setdefault(user_id, {})
        doc.update({"isOnline": is_online, "activeChatId": active_chat_id, "lastActive": datetime.now(timezone.utc)})


class FakePushSender:
    enabled = True

    def __init__(self) -> None:
        self.sent: list[PushPayload] = []
        self.error: Exception | None = None

    async def send(self, payload: PushPayload) -> str | None:
        if self.error:
            raise self.error
        self.sent.append(payload)
        return f"projects/test/messages/{len(self.sent)}"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, FIREBASE_CREDENTIALS_JSON="", FIREBASE_CREDENTIALS_PATH="")


@pytest.fixture
def profile_store() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def integrations(profile_store, push_sender) -> Integrations:
    return Integrations(profile_store=profile_store, push_sender=push_sender)


@pytest.fixture
def client(settings, integrations) -> TestClient:
    app = create_app(settings, integrations)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def degraded_client(settings) -> TestClient:
    app = create_app(settings, degraded_integrations())
    return TestClient(app, raise_server_exceptions=False)
