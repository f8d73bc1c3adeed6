"""
Firebase Admin bootstrap shared by the profile store and the push sender.
Initializes from a service account JSON string or file path. Returns None (degraded mode) if no
usable credentials are configured, so startup never fails on missing Firebase config.
"""
import json
import logging
from pathlib import Path
from typing import Any

from chat_relay.core.config import BASE_DIR, Settings

logger = logging.getLogger(__name__)

APP_NAME = "chat-relay"


def load_credentials(settings: Settings) -> dict[str, Any] | None:
    """Load Firebase credentials from FIREBASE_CREDENTIALS_JSON (preferred) or FIREBASE_CREDENTIALS_PATH."""
    json_str = (settings.FIREBASE_CREDENTIALS_JSON or "").strip()
    if json_str:
        try:
            return json.loads(json_str)
        except json.JSONDecodeError as e:
            logger.warning("Firebase credentials JSON invalid: %s", e)
            return None
    path = (settings.FIREBASE_CREDENTIALS_PATH or "").strip()
    if path:
        p = Path(path)
        full_path = p if p.is_absolute() else BASE_DIR / path
        if full_path.exists():
            try:
                with open(full_path) as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Firebase credentials file unreadable: %s (%s)", full_path, e)
                return None
        logger.warning("Firebase credentials path not found: %s", full_path)
    return None


def init_firebase_app(settings: Settings):
    """Initialize (or reuse) the Firebase Admin app for this process; None if not configured."""
    cred_dict = load_credentials(settings)
    if not cred_dict:
        return None
    try:
        import firebase_admin
        from firebase_admin import credentials

        try:
            return firebase_admin.get_app(APP_NAME)
        except ValueError:
            pass  # not initialized yet
        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        cred = credentials.Certificate(cred_dict)
        app = firebase_admin.initialize_app(cred, options=options, name=APP_NAME)
        logger.info("Firebase Admin SDK initialized")
        return app
    except Exception as e:
        logger.exception("Firebase initialization failed: %s", e)
        return None
