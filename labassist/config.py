"""
Application Configuration

Loads environment variables using pydantic-settings.
All settings can be overridden via a .env file or environment variables.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gemini: an API key wins; otherwise Vertex AI via project/location
    GEMINI_API_KEY: str = ""
    GOOGLE_CLOUD_PROJECT: str = ""
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GEMINI_CHAT_MODELS: list[str] = [
        "gemini-2.0-flash",
        "gemini-2.0-flash-lite",
        "gemini-2.5-flash",
    ]
    GEMINI_EXTRACTION_MODEL: str = "gemini-2.5-flash"
    GEMINI_TIMEOUT_S: float = 20.0

    MAX_UPLOAD_SIZE_MB: int = 20

    # Chat timers (seconds)
    HOSPITAL_CARD_DELAY_S: float = 0.5
    FOLLOWUP_DELAY_S: float = 0.3

    DEFAULT_LANGUAGE: str = "en"
    ALLOWED_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=str(_ENV_FILE), extra="ignore")

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


settings = Settings()
