"""Device token registration and presence updates for user profiles."""
import logging

from chat_relay.api.users.schemas import (
    UpdateFcmTokenRequest,
    UpdateFcmTokenResponse,
    UpdatePresenceRequest,
    UpdatePresenceResponse,
)
from chat_relay.core.exceptions import AppException, ProfileStoreError
from chat_relay.core.startup import Integrations
from chat_relay.models.user_profile import DEFAULT_DEVICE_TYPE

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, integrations: Integrations):
        self.profile_store = integrations.profile_store

    async def update_fcm_token(self, user_id: str, data: UpdateFcmTokenRequest) -> UpdateFcmTokenResponse:
        """
        Store the user's push token (replacing any previous one) and mark the user online.
        The online flag is kept for existing clients; presence proper goes through update_presence.
        """
        token = (data.fcm_token or "").strip()
        logger.info(
            "FCM token update request: user=%s device=%s token=%s",
            user_id, data.device_type, f"{token[:20]}..." if token else None,
        )
        if not token:
            AppException.raise_400(
                "fcmToken is required",
                received={"userId": user_id, "deviceType": data.device_type},
            )
        device_type = data.device_type or DEFAULT_DEVICE_TYPE

        if not self.profile_store.enabled:
            logger.info("Firebase disabled - token logged only (user=%s)", user_id)
            return UpdateFcmTokenResponse(
                message="FCM token received (Firebase disabled)",
                userId=user_id,
                deviceType=device_type,
                firebase=False,
            )

        try:
            await self.profile_store.save_push_token(user_id, token, device_type, mark_online=True)
        except ProfileStoreError as e:
            logger.error("Error updating FCM token for %s: %s", user_id, e.detail)
            AppException.raise_500("Failed to update FCM token", details=e.detail, userId=user_id)

        logger.info("FCM token saved for user: %s", user_id)
        return UpdateFcmTokenResponse(
            message="FCM token updated successfully",
            userId=user_id,
            deviceType=device_type,
            firebase=True,
        )

    async def update_presence(self, user_id: str, data: UpdatePresenceRequest) -> UpdatePresenceResponse:
        if not self.profile_store.enabled:
            logger.info("Firebase disabled - presence logged only (user=%s)", user_id)
            return UpdatePresenceResponse(
                message="Presence received (Firebase disabled)",
                userId=user_id,
                isOnline=data.is_online,
                activeChatId=data.active_chat_id,
                firebase=False,
            )

        try:
            await self.profile_store.save_presence(user_id, data.is_online, data.active_chat_id)
        except ProfileStoreError as e:
            logger.error("Error updating presence for %s: %s", user_id, e.detail)
            AppException.raise_500("Failed to update presence", details=e.detail, userId=user_id)

        logger.debug("Presence saved for user %s: online=%s chat=%s", user_id, data.is_online, data.active_chat_id)
        return UpdatePresenceResponse(
            message="Presence updated successfully",
            userId=user_id,
            isOnline=data.is_online,
            activeChatId=data.active_chat_id,
            firebase=True,
        )
