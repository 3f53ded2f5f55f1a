"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "FocusMate"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./focusmate.db"

    # JWT bearer tokens for API clients
    secret_key: str = "change-me-in-production-use-env"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Auth cookie (holds the signed session user)
    auth_cookie_name: str = "focusmate_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # Passwords
    bcrypt_rounds: int = 12
    password_min_length: int = 8

    # Gemini coach
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    coach_recent_entries: int = 5
    coach_max_chats: int = 256  # in-memory chats kept, least recently used dropped first

    # Mock external identity provider
    external_login_delay_seconds: float = 0.8

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


# Repository root (parent of focusmate/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
