"""
Configuration management for MedReminder
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "MedReminder"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./medreminder.db"
    DATABASE_ECHO: bool = False

    # Scheduling clock (IANA zone used to decide "today" and "now")
    TIMEZONE: str = "UTC"

    # Notifications
    NOTIFICATION_WEBHOOK_URL: Optional[str] = None
    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class ReminderConfig:
    """Configuration for reminder planning and adherence analytics"""

    # Liveness notification fired after every scheduler run
    TEST_NOTIFICATION_DELAY_SECONDS: int = 10

    # A day counts towards the streak at or above this taken/total ratio
    STREAK_ADHERENCE_THRESHOLD: float = 0.80

    # Stats window
    DEFAULT_STATS_WINDOW_DAYS: int = 30
    MAX_STATS_WINDOW_DAYS: int = 365

    # Message templates per reminder kind
    TEMPLATES: dict[str, dict[str, str]] = {
        "before": {
            "title": "Medicine Reminder ⏰",
            "message": "Take {medicine_name} in {remind_before}",
        },
        "onTime": {
            "title": "Time to Take Medicine 💊",
            "message": "Take {medicine_name} now",
        },
        "after": {
            "title": "Missed Dose ❗",
            "message": "Did you forget {medicine_name}?",
        },
        "test": {
            "title": "🔔 Test Notification",
            "message": "This is a dummy test alert!",
        },
    }


# Database table names
class TableNames:
    USERS = "users"
    MEDICATIONS = "medications"
    DOSAGE_TIMES = "dosage_times"
    ADHERENCE_RECORDS = "adherence_records"
    NOTIFICATION_LOGS = "notification_logs"
    NOTIFICATION_ENTRIES = "notification_entries"


settings = get_settings()
reminder_config = ReminderConfig()
