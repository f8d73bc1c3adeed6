from fastapi import APIRouter, Depends, status

from chat_relay.api.notifications.schemas import SendNotificationRequest, SendNotificationResponse
from chat_relay.api.notifications.service import NotificationService
from chat_relay.core.deps import get_integrations
from chat_relay.core.startup import Integrations

router = APIRouter()


@router.post(
    "/send-notification",
    response_model=SendNotificationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Relay a chat message as a push notification",
    description="Looks up the receiver's FCM token and sends a push, unless the receiver is already viewing the chat.",
    tags=["notifications"],
)
async def send_notification(
    data: SendNotificationRequest | None = None,
    integrations: Integrations = Depends(get_integrations),
):
    service = NotificationService(integrations)
    return await service.send_chat_notification(data or SendNotificationRequest())
