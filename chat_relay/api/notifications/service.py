"""Relay a chat message event to the receiver's device as a push notification."""
import logging

from chat_relay.api.notifications.schemas import (
    NotificationPreview,
    SendNotificationRequest,
    SendNotificationResponse,
)
from chat_relay.core.exceptions import AppException, InvalidTokenError, ProfileStoreError, PushSendError
from chat_relay.core.formatter import format_notification_body, preview
from chat_relay.core.presence import should_suppress
from chat_relay.core.push_sender import CLICK_ACTION, PushPayload
from chat_relay.core.startup import Integrations
from chat_relay.models.enums import MessageType, NotificationKind

logger = logging.getLogger(__name__)


def build_chat_payload(
    token: str,
    chat_id: str,
    sender_id: str,
    sender_name: str,
    message_type: str,
    body: str,
) -> PushPayload:
    return PushPayload(
        token=token,
        title=sender_name,
        body=body,
        data={
            "chatId": chat_id,
            "senderId": sender_id,
            "senderName": sender_name,
            "messageType": message_type,
            "type": NotificationKind.chat.value,
            "click_action": CLICK_ACTION,
        },
    )


class NotificationService:
    def __init__(self, integrations: Integrations):
        self.profile_store = integrations.profile_store
        self.push_sender = integrations.push_sender

    async def send_chat_notification(self, data: SendNotificationRequest) -> SendNotificationResponse:
        """
        Validate, look up the receiver, apply the presence gate and send.
        Raises ApiError for every client or integration failure.
        """
        logger.info(
            "Notification request: receiver=%s sender=%s chat=%s type=%s",
            data.receiver_id, data.sender_id, data.chat_id, data.message_type,
        )
        missing = data.missing_fields()
        if missing:
            AppException.raise_400(
                "Missing required fields",
                required=list(SendNotificationRequest.REQUIRED_FIELDS),
                missing=missing,
            )
        message_type = data.message_type or MessageType.text.value

        if not self.profile_store.enabled:
            logger.info("Firebase disabled - notification logged only (receiver=%s)", data.receiver_id)
            return SendNotificationResponse(
                message="Notification logged (Firebase disabled)",
                data=NotificationPreview(
                    receiverId=data.receiver_id,
                    senderName=data.sender_name,
                    messagePreview=preview(data.message),
                    chatId=data.chat_id,
                ),
                firebase=False,
            )

        try:
            profile = await self.profile_store.get_profile(data.receiver_id)
        except ProfileStoreError as e:
            AppException.raise_500("Failed to send notification", details=e.detail, code=e.code or "UNKNOWN_ERROR")

        if profile is None:
            logger.info("Receiver not found: %s", data.receiver_id)
            AppException.raise_404("Receiver not found", receiverId=data.receiver_id)
        if not profile.has_push_token:
            logger.info("No FCM token for receiver: %s", data.receiver_id)
            AppException.raise_400("No FCM token found for receiver", receiverId=data.receiver_id)

        if should_suppress(profile, data.chat_id):
            logger.info("Receiver %s is viewing chat %s, skipping notification", data.receiver_id, data.chat_id)
            return SendNotificationResponse(
                message="User is viewing this chat, notification skipped",
                skipped=True,
                receiverId=data.receiver_id,
            )

        body = format_notification_body(data.message, message_type)
        payload = build_chat_payload(
            token=profile.push_token,
            chat_id=data.chat_id,
            sender_id=data.sender_id,
            sender_name=data.sender_name,
            message_type=message_type,
            body=body,
        )
        try:
            message_id = await self.push_sender.send(payload)
        except InvalidTokenError:
            AppException.raise_400(
                "Invalid or expired FCM token",
                code=InvalidTokenError.code_name,
                receiverId=data.receiver_id,
            )
        except PushSendError as e:
            AppException.raise_500("Failed to send notification", details=e.detail, code=e.code or "UNKNOWN_ERROR")

        logger.info("FCM notification sent to %s: %s", data.receiver_id, message_id)
        return SendNotificationResponse(
            messageId=message_id,
            receiverId=data.receiver_id,
            senderName=data.sender_name,
            notificationBody=body,
            firebase=True,
        )
