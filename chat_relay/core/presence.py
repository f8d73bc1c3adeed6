from chat_relay.models.user_profile import UserProfile


def should_suppress(profile: UserProfile, chat_id: str) -> bool:
    """True when the receiver is online with this chat already open, so a push would be redundant."""
    if not profile.is_online or profile.active_chat_id is None:
        return False
    return profile.active_chat_id == chat_id
