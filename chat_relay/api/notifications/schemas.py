from typing import ClassVar, Optional

from pydantic import BaseModel, Field

from chat_relay.models.enums import MessageType


class SendNotificationRequest(BaseModel):
    """A chat message event to relay as a push to the receiver."""

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("receiverId", "senderId", "senderName", "message", "chatId")

    receiver_id: Optional[str] = Field(None, alias="receiverId")
    sender_id: Optional[str] = Field(None, alias="senderId")
    sender_name: Optional[str] = Field(None, alias="senderName")
    message: Optional[str] = None
    chat_id: Optional[str] = Field(None, alias="chatId")
    message_type: Optional[str] = Field(MessageType.text.value, alias="messageType")

    class Config:
        populate_by_name = True

    def missing_fields(self) -> list[str]:
        """Required fields (wire names) that are absent or empty, in declaration order."""
        by_alias = self.model_dump(by_alias=True)
        return [name for name in self.REQUIRED_FIELDS if not by_alias.get(name)]


class NotificationPreview(BaseModel):
    receiverId: str
    senderName: str
    messagePreview: str
    chatId: str


class SendNotificationResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    messageId: Optional[str] = None
    receiverId: Optional[str] = None
    senderName: Optional[str] = None
    notificationBody: Optional[str] = None
    skipped: Optional[bool] = None
    data: Optional[NotificationPreview] = None
    firebase: Optional[bool] = None
