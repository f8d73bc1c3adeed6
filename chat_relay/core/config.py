from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# -------------------------------------------------
# Explicitly load .env before Settings is resolved
# -------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH)


class Settings(BaseSettings):
    APP_NAME: str = "Chat Notification API"
    APP_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = Field(default="production", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"))
    LOG_LEVEL: str = "INFO"

    # Firebase (Firestore profile store + FCM). Leave empty to run in degraded "logged only" mode.
    FIREBASE_CREDENTIALS_JSON: str = Field(
        default="",
        validation_alias=AliasChoices("FIREBASE_CREDENTIALS_JSON", "FIREBASE_SERVICE_ACCOUNT"),
        description="Raw JSON string of the service account (e.g. from env)",
    )
    FIREBASE_CREDENTIALS_PATH: str = Field(
        default="firebase-service-account.json",
        description="Path to Firebase service account JSON file, relative to the project root unless absolute",
    )
    FIREBASE_PROJECT_ID: str = ""

    # Profile store
    USERS_COLLECTION: str = "users"
    STORE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Push sender
    SEND_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    SEND_MAX_ATTEMPTS: int = Field(default=3, ge=1, description="Attempts for transient FCM failures")
    SEND_RETRY_BACKOFF_SECONDS: float = Field(default=0.5, ge=0, description="Base backoff, doubled per retry")
    ANDROID_CHANNEL_ID: str = "chat_messages"
    ANDROID_NOTIFICATION_ICON: str = "ic_notification"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        extra = "ignore"
        env_file = str(ENV_PATH)
        env_file_encoding = "utf-8"


settings = Settings()
