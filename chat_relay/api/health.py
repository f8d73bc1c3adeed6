from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from chat_relay.core.config import Settings
from chat_relay.core.deps import get_integrations, get_settings
from chat_relay.core.startup import Integrations

router = APIRouter()

ENDPOINTS = {
    "GET /": "API information",
    "GET /health": "Health check",
    "POST /send-notification": "Send push notification",
    "POST /user/{userId}/fcm-token": "Update FCM token",
    "POST /user/{userId}/presence": "Update presence (online / active chat)",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/", summary="API information")
async def root(
    settings: Settings = Depends(get_settings),
    integrations: Integrations = Depends(get_integrations),
):
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": ENDPOINTS,
        "firebase_enabled": integrations.firebase_enabled,
        "timestamp": _now(),
    }


@router.get("/health", summary="Health Check")
async def health_check(
    settings: Settings = Depends(get_settings),
    integrations: Integrations = Depends(get_integrations),
):
    return {
        "status": "OK",
        "message": f"{settings.APP_NAME} is running",
        "firebase_enabled": integrations.firebase_enabled,
        "timestamp": _now(),
    }
