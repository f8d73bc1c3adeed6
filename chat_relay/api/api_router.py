from fastapi import APIRouter

from chat_relay.api.health import router as health_router
from chat_relay.api.notifications.router import router as notifications_router
from chat_relay.api.users.router import router as users_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(notifications_router)  # Tags are defined in the router itself
api_router.include_router(users_router, prefix="/user", tags=["users"])
