from fastapi import Request

from chat_relay.core.config import Settings
from chat_relay.core.startup import Integrations


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_integrations(request: Request) -> Integrations:
    """Collaborators built once in create_app and shared by every request."""
    return request.app.state.integrations
