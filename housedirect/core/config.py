"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "HouseDirect Backend"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:5173"
    frontend_url: str = "http://localhost:5173"

    # Database
    database_url: str

    # Firebase Auth
    firebase_project_id: str
    google_application_credentials: Optional[str] = None

    # SMTP
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 10.0

    # Scheduled jobs
    cron_secret: Optional[str] = None
    reminder_delay_seconds: float = 0.5
    notification_max_attempts: int = 3
    notification_lease_seconds: int = 300

    @property
    def smtp_configured(self) -> bool:
        """SMTP delivery needs credentials; host and port have defaults."""
        return bool(self.smtp_user and self.smtp_password)

    @property
    def sender_address(self) -> Optional[str]:
        return self.smtp_from or self.smtp_user


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
