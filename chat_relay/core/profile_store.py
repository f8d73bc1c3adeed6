"""
Profile store: user id -> UserProfile document (push token, device type, presence).
FirestoreProfileStore is backed by a Firestore collection; NullProfileStore stands in when Firebase
is not configured and reports enabled=False so callers can answer in degraded mode.
"""
import asyncio
import logging
from typing import Any, Protocol

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from chat_relay.core.exceptions import ProfileStoreError
from chat_relay.models.user_profile import DEFAULT_DEVICE_TYPE, UserProfile

logger = logging.getLogger(__name__)

MAX_DOCUMENT_ID_BYTES = 1500


def is_valid_document_id(user_id: str) -> bool:
    """Firestore document id rules: non-empty, no '/', not '.' or '..', not __reserved__, at most 1500 bytes."""
    if not user_id or "/" in user_id or user_id in (".", ".."):
        return False
    if len(user_id) >= 4 and user_id.startswith("__") and user_id.endswith("__"):
        return False
    return len(user_id.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES


class ProfileStore(Protocol):
    enabled: bool

    async def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the profile for user_id, or None if no record exists."""

    async def save_push_token(
        self,
        user_id: str,
        push_token: str,
        device_type: str = DEFAULT_DEVICE_TYPE,
        mark_online: bool = True,
    ) -> None:
        """Merge-upsert the push token; creates the record on first call."""

    async def save_presence(self, user_id: str, is_online: bool, active_chat_id: str | None) -> None:
        """Merge-upsert presence fields."""


class FirestoreProfileStore:
    """Profile documents live at <collection>/<user_id>; writes use merge so unrelated fields survive."""

    enabled = True

    def __init__(self, firebase_app, collection: str = "users", timeout_seconds: float = 10.0):
        self._client = firestore.client(app=firebase_app)
        self._collection = collection
        self._timeout = timeout_seconds

    def _document(self, user_id: str):
        return self._client.collection(self._collection).document(user_id)

    async def _call(self, operation: str, user_id: str, method: str, *args, **kwargs):
        try:
            fn = getattr(self._document(user_id), method)
            return await asyncio.wait_for(
                asyncio.to_thread(fn, *args, timeout=self._timeout, **kwargs),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning("Profile store %s timed out for user %s", operation, user_id)
            raise ProfileStoreError(f"Profile store {operation} timed out after {self._timeout}s", code="TIMEOUT") from e
        except ValueError as e:
            logger.warning("Profile store %s rejected user id %r: %s", operation, user_id, e)
            raise ProfileStoreError(str(e), code="INVALID_ARGUMENT") from e
        except google_exceptions.GoogleAPIError as e:
            logger.warning("Profile store %s failed for user %s: %s", operation, user_id, e)
            code = getattr(getattr(e, "grpc_status_code", None), "name", None)
            raise ProfileStoreError(str(e), code=code) from e

    async def get_profile(self, user_id: str) -> UserProfile | None:
        # An id that cannot name a document has no profile; never let it address a nested path
        if not is_valid_document_id(user_id):
            logger.info("Profile lookup for invalid user id %r", user_id)
            return None
        snapshot = await self._call("read", user_id, "get")
        if not snapshot.exists:
            return None
        return UserProfile.from_document(user_id, snapshot.to_dict())

    async def _merge(self, operation: str, user_id: str, fields: dict[str, Any]) -> None:
        if not is_valid_document_id(user_id):
            raise ProfileStoreError(f"Invalid user id {user_id!r}", code="INVALID_ARGUMENT")
        await self._call(operation, user_id, "set", fields, merge=True)

    async def save_push_token(
        self,
        user_id: str,
        push_token: str,
        device_type: str = DEFAULT_DEVICE_TYPE,
        mark_online: bool = True,
    ) -> None:
        fields: dict[str, Any] = {
            "fcmToken": push_token,
            "deviceType": device_type or DEFAULT_DEVICE_TYPE,
            "lastTokenUpdate": firestore.SERVER_TIMESTAMP,
            "lastActive": firestore.SERVER_TIMESTAMP,
        }
        if mark_online:
            fields["isOnline"] = True
        await self._merge("token update", user_id, fields)

    async def save_presence(self, user_id: str, is_online: bool, active_chat_id: str | None) -> None:
        await self._merge(
            "presence update",
            user_id,
            {
                "isOnline": is_online,
                "activeChatId": active_chat_id,
                "lastActive": firestore.SERVER_TIMESTAMP,
            },
        )


class NullProfileStore:
    """No-op store used when Firebase is not configured."""

    enabled = False

    async def get_profile(self, user_id: str) -> UserProfile | None:
        logger.debug("Profile store disabled; no profile for %s", user_id)
        return None

    async def save_push_token(
        self,
        user_id: str,
        push_token: str,
        device_type: str = DEFAULT_DEVICE_TYPE,
        mark_online: bool = True,
    ) -> None:
        logger.debug("Profile store disabled; dropping token update for %s", user_id)

    async def save_presence(self, user_id: str, is_online: bool, active_chat_id: str | None) -> None:
        logger.debug("Profile store disabled; dropping presence update for %s", user_id)
