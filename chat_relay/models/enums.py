from enum import Enum


class MessageType(str, Enum):
    text = "text"
    image = "image"
    video = "video"
    audio = "audio"
    document = "document"
    location = "location"


class NotificationKind(str, Enum):
    # Routing tag the client app uses to open the right screen
    chat = "chat"
