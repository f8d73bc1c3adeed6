from fastapi import APIRouter, Depends, status

from chat_relay.api.users.schemas import (
    UpdateFcmTokenRequest,
    UpdateFcmTokenResponse,
    UpdatePresenceRequest,
    UpdatePresenceResponse,
)
from chat_relay.api.users.service import UserService
from chat_relay.core.deps import get_integrations
from chat_relay.core.startup import Integrations

router = APIRouter()


@router.post(
    "/{user_id}/fcm-token",
    response_model=UpdateFcmTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Register or update a device token",
    description="Stores the FCM token for the user (creating the profile on first call) and marks the user online.",
)
async def update_fcm_token(
    user_id: str,
    data: UpdateFcmTokenRequest | None = None,
    integrations: Integrations = Depends(get_integrations),
):
    user_service = UserService(integrations)
    return await user_service.update_fcm_token(user_id, data or UpdateFcmTokenRequest())


@router.post(
    "/{user_id}/presence",
    response_model=UpdatePresenceResponse,
    status_code=status.HTTP_200_OK,
    summary="Update presence",
    description="Sets whether the user is online and which chat is open; used to suppress redundant pushes.",
)
async def update_presence(
    user_id: str,
    data: UpdatePresenceRequest,
    integrations: Integrations = Depends(get_integrations),
):
    user_service = UserService(integrations)
    return await user_service.update_presence(user_id, data)
