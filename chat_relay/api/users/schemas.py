from typing import Optional

from pydantic import BaseModel, Field


class UpdateFcmTokenRequest(BaseModel):
    fcm_token: Optional[str] = Field(None, alias="fcmToken", description="Device registration token issued by FCM")
    device_type: Optional[str] = Field(None, alias="deviceType", description="Free-form client label, e.g. android / ios")

    class Config:
        populate_by_name = True


class UpdateFcmTokenResponse(BaseModel):
    success: bool = True
    message: str
    userId: str
    deviceType: str
    firebase: bool


class UpdatePresenceRequest(BaseModel):
    """Explicit presence change; activeChatId null means no conversation is open."""

    is_online: bool = Field(..., alias="isOnline")
    active_chat_id: Optional[str] = Field(None, alias="activeChatId")

    class Config:
        populate_by_name = True


class UpdatePresenceResponse(BaseModel):
    success: bool = True
    message: str
    userId: str
    isOnline: bool
    activeChatId: Optional[str] = None
    firebase: bool
