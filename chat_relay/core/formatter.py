"""Human-readable notification bodies for chat messages."""
from chat_relay.models.enums import MessageType

MAX_BODY_LENGTH = 100
ELLIPSIS = "..."
FALLBACK_BODY = "New message"

_MEDIA_BODIES = {
    MessageType.image.value: "📷 Sent an image",
    MessageType.video.value: "🎥 Sent a video",
    MessageType.audio.value: "🎵 Sent an audio message",
    MessageType.document.value: "📄 Sent a document",
    MessageType.location.value: "📍 Shared location",
}


def format_notification_body(message: str | None, message_type: str | None = MessageType.text.value) -> str:
    """
    Summarize a chat message for the notification body.
    Media types map to fixed labels; anything else is the message text, truncated to
    MAX_BODY_LENGTH characters plus an ellipsis, or FALLBACK_BODY when empty.
    """
    label = _MEDIA_BODIES.get(message_type or "")
    if label is not None:
        return label
    if not message:
        return FALLBACK_BODY
    if len(message) > MAX_BODY_LENGTH:
        return message[:MAX_BODY_LENGTH] + ELLIPSIS
    return message


def preview(text: str, length: int = 50) -> str:
    """Short preview used in log lines and degraded-mode responses."""
    return text[:length] + (ELLIPSIS if len(text) > length else "")
