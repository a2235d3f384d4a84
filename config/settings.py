"""
Configuration Management for BreathSafe Alerts API
Loads environment variables and provides centralized settings
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings and configuration"""

    # API Configuration
    APP_NAME = os.getenv("APP_NAME", "BreathSafe")
    API_TITLE = "BreathSafe Alerts API"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Scheduled air quality SMS alerts with personalized mask guidance"
    API_HOST = "0.0.0.0"
    API_PORT = 8000

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./breathsafe.db")

    # External API URLs (Open-Meteo needs no key)
    GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
    AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"
    WEATHER_URL = "https://api.open-meteo.com/v1/forecast"
    GEOCODING_RESULT_COUNT = 5
    GEOCODING_LANGUAGE = "en"
    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "5"))

    # Forecast Settings
    FORECAST_DAYS = int(os.getenv("FORECAST_DAYS", "2"))

    # Alert Settings
    ALERT_AQI_THRESHOLD = int(os.getenv("ALERT_AQI_THRESHOLD", "88"))
    ALERT_WINDOW_HOURS = int(os.getenv("ALERT_WINDOW_HOURS", "24"))
    ALERT_CRON = os.getenv("ALERT_CRON", "2 11 * * *")
    ALERT_TIMEZONE = os.getenv("ALERT_TIMEZONE") or None
    SCHEDULER_ENABLED = _env_bool("SCHEDULER_ENABLED", "True")

    # SMS
    SMS_MAX_LENGTH = 150
    TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
    TWILIO_FROM_NUMBER = os.getenv("TWILIO_FROM_NUMBER", "")
    SMS_DRY_RUN = _env_bool("SMS_DRY_RUN")
    DEFAULT_COUNTRY_CODE = os.getenv("DEFAULT_COUNTRY_CODE", "+91")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def twilio_configured(cls) -> bool:
        """True when every Twilio credential is present"""
        return all(
            value.strip()
            for value in (cls.TWILIO_ACCOUNT_SID, cls.TWILIO_AUTH_TOKEN, cls.TWILIO_FROM_NUMBER)
        )

    @classmethod
    def validate_config(cls):
        """Validate configuration and warn about missing keys"""
        warnings = []

        if cls.SMS_DRY_RUN:
            warnings.append("SMS_DRY_RUN enabled - alert messages are logged, not sent")
        elif not cls.twilio_configured():
            warnings.append("Twilio credentials not set - SMS delivery will fail")
        elif not cls.TWILIO_FROM_NUMBER.startswith("+"):
            warnings.append("TWILIO_FROM_NUMBER is missing the + prefix")

        if cls.ALERT_AQI_THRESHOLD not in (50, 100, 150, 200, 300):
            warnings.append(
                f"ALERT_AQI_THRESHOLD={cls.ALERT_AQI_THRESHOLD} does not match an AQI category breakpoint"
            )

        return warnings


# Create singleton instance
settings = Settings()
