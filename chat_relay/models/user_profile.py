from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_DEVICE_TYPE = "unknown"


class UserProfile(BaseModel):
    """Profile document stored per user id in the profile store (field names match the stored layout)."""

    user_id: str = Field(..., exclude=True)
    push_token: Optional[str] = Field(None, alias="fcmToken")
    device_type: str = Field(DEFAULT_DEVICE_TYPE, alias="deviceType")
    is_online: bool = Field(False, alias="isOnline")
    active_chat_id: Optional[str] = Field(None, alias="activeChatId")
    last_token_update: Optional[datetime] = Field(None, alias="lastTokenUpdate")
    last_active: Optional[datetime] = Field(None, alias="lastActive")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @classmethod
    def from_document(cls, user_id: str, data: dict[str, Any] | None) -> "UserProfile":
        """Build a profile from a stored document; null stored values fall back to field defaults."""
        cleaned = {k: v for k, v in (data or {}).items() if v is not None and k != "user_id"}
        return cls(user_id=user_id, **cleaned)

    @property
    def has_push_token(self) -> bool:
        return bool((self.push_token or "").strip())
