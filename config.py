"""
Configuration management for MedAlert
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "MedAlert"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./medalert.db"
    DATABASE_ECHO: bool = False

    # Email transport (EmailJS REST API)
    EMAILJS_SERVICE_ID: Optional[str] = None
    EMAILJS_TEMPLATE_ID: Optional[str] = None
    EMAILJS_PUBLIC_KEY: Optional[str] = None
    EMAILJS_API_URL: str = "https://api.emailjs.com/api/v1.0/email/send"
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # Fallback zone for profiles without their own offset
    DEFAULT_TIMEZONE_OFFSET: str = "+05:30"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def email_configured(self) -> bool:
        return bool(
            self.EMAILJS_SERVICE_ID
            and self.EMAILJS_TEMPLATE_ID
            and self.EMAILJS_PUBLIC_KEY
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class AlertConfig:
    """Constants for missed-dose alerting"""

    # Caretaker-selectable delay after the reminder time before alerting
    ALERT_DELAY_MINUTES: dict[str, int] = {
        "10 min": 10,
        "30 min": 30,
        "1 hour": 60,
        "2 hours": 120,
    }

    DEFAULT_PATIENT_NAME: str = "Patient"
    SENDER_NAME: str = "Medication Reminder"


settings = get_settings()
alert_config = AlertConfig()
