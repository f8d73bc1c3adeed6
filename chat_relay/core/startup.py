"""
Startup wiring: resolve the Firebase integration once and build the collaborators the
request handlers use.
"""
import logging
from dataclasses import dataclass

from chat_relay.core.config import Settings
from chat_relay.core.firebase_client import init_firebase_app
from chat_relay.core.profile_store import FirestoreProfileStore, NullProfileStore, ProfileStore
from chat_relay.core.push_sender import FirebasePushSender, NullPushSender, PlatformOptions, PushSender

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Integrations:
    profile_store: ProfileStore
    push_sender: PushSender

    @property
    def firebase_enabled(self) -> bool:
        return self.profile_store.enabled and self.push_sender.enabled


def degraded_integrations() -> Integrations:
    return Integrations(profile_store=NullProfileStore(), push_sender=NullPushSender())


def build_integrations(settings: Settings) -> Integrations:
    """
    Build Firestore/FCM collaborators when credentials are available.
    Without credentials (or if initialization fails) the relay runs in degraded mode:
    requests are accepted and logged only.
    """
    firebase_app = init_firebase_app(settings)
    if firebase_app is None:
        logger.warning("Running without Firebase - notifications will be logged only")
        return degraded_integrations()
    try:
        profile_store = FirestoreProfileStore(
            firebase_app,
            collection=settings.USERS_COLLECTION,
            timeout_seconds=settings.STORE_TIMEOUT_SECONDS,
        )
    except Exception as e:
        logger.exception("Firestore client initialization failed: %s", e)
        logger.warning("Running without Firebase - notifications will be logged only")
        return degraded_integrations()
    push_sender = FirebasePushSender(
        firebase_app,
        options=PlatformOptions(
            android_channel_id=settings.ANDROID_CHANNEL_ID,
            android_icon=settings.ANDROID_NOTIFICATION_ICON,
        ),
        timeout_seconds=settings.SEND_TIMEOUT_SECONDS,
        max_attempts=settings.SEND_MAX_ATTEMPTS,
        backoff_seconds=settings.SEND_RETRY_BACKOFF_SECONDS,
    )
    logger.info("Firebase integration enabled (collection=%s)", settings.USERS_COLLECTION)
    return Integrations(profile_store=profile_store, push_sender=push_sender)
