"""
Push delivery via Firebase Cloud Messaging (FCM).
FirebasePushSender retries transient provider failures with bounded backoff and raises
InvalidTokenError (never retried) when FCM reports the token as unregistered.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from chat_relay.core.exceptions import InvalidTokenError, PushSendError

logger = logging.getLogger(__name__)

CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"

_TRANSIENT_ERRORS = (
    firebase_exceptions.UnavailableError,
    firebase_exceptions.InternalError,
)


@dataclass(frozen=True)
class PushPayload:
    """A single push to a single device. data values must be strings (FCM requirement)."""

    token: str
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PlatformOptions:
    android_channel_id: str = "chat_messages"
    android_icon: str = "ic_notification"
    apns_badge: int = 1


class PushSender(Protocol):
    enabled: bool

    async def send(self, payload: PushPayload) -> str | None:
        """Deliver the payload; return the provider's message id (None when nothing was sent)."""


def build_fcm_message(payload: PushPayload, options: PlatformOptions = PlatformOptions()) -> messaging.Message:
    """Serialize a PushPayload into an FCM message with Android and APNs blocks."""
    return messaging.Message(
        token=payload.token,
        notification=messaging.Notification(title=payload.title, body=payload.body),
        data={k: str(v) for k, v in payload.data.items()},
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(
                channel_id=options.android_channel_id,
                sound="default",
                icon=options.android_icon,
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=payload.title, body=payload.body),
                    sound="default",
                    badge=options.apns_badge,
                )
            )
        ),
    )


class FirebasePushSender:
    enabled = True

    def __init__(
        self,
        firebase_app,
        options: PlatformOptions = PlatformOptions(),
        timeout_seconds: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
    ):
        self._app = firebase_app
        self._options = options
        self._timeout = timeout_seconds
        self._max_attempts = max(1, max_attempts)
        self._backoff = backoff_seconds

    async def send(self, payload: PushPayload) -> str | None:
        message = build_fcm_message(payload, self._options)
        token_preview = payload.token[:20]
        for attempt in range(1, self._max_attempts + 1):
            try:
                message_id = await asyncio.wait_for(
                    asyncio.to_thread(messaging.send, message, app=self._app),
                    timeout=self._timeout,
                )
                logger.debug("FCM sent to token %s... (attempt %d)", token_preview, attempt)
                return message_id
            except messaging.UnregisteredError as e:
                logger.warning("FCM: device token no longer valid (unregistered): %s...", token_preview)
                raise InvalidTokenError(str(e)) from e
            except asyncio.TimeoutError as e:
                # The worker thread may still deliver; a retry could push twice
                logger.error("FCM send timed out after %.2fs (attempt %d), not retrying", self._timeout, attempt)
                raise PushSendError(f"FCM send timed out after {self._timeout}s", code="TIMEOUT") from e
            except _TRANSIENT_ERRORS as e:
                if attempt >= self._max_attempts:
                    logger.error("FCM send failed after %d attempts: %s", attempt, e)
                    raise PushSendError(str(e), code=e.code) from e
                delay = self._backoff * (2 ** (attempt - 1))
                logger.warning("FCM transient failure (%s), retrying in %.2fs (attempt %d/%d)", e.code, delay, attempt, self._max_attempts)
                await asyncio.sleep(delay)
            except firebase_exceptions.FirebaseError as e:
                logger.error("FCM send failed: %s", e)
                raise PushSendError(str(e), code=e.code) from e


class NullPushSender:
    """No-op sender used when Firebase is not configured."""

    enabled = False

    async def send(self, payload: PushPayload) -> str | None:
        logger.debug("Push sender disabled; dropping notification '%s'", payload.title)
        return None
