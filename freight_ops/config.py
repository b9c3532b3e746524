"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "FreightOps Back Office"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/freight_ops"
    )

    # Pricing
    DEFAULT_KG_RATE: Decimal = Decimal(os.getenv("DEFAULT_KG_RATE", "2.0"))
    BASE_CURRENCY: str = os.getenv("BASE_CURRENCY", "USD")

    # Public tracking page embedded in LTA QR codes
    TRACKING_BASE_URL: str = os.getenv(
        "TRACKING_BASE_URL",
        "http://localhost:4201/tracking"
    )

    # Author recorded on automatic journal entries and status changes
    SYSTEM_USER: str = os.getenv("SYSTEM_USER", "SYSTEM")

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
