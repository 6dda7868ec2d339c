# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Environment-driven settings.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "selection-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8010"))

    # Empty → in-memory repositories
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    DEFAULT_MEMORY_HORIZON_DAYS: int = int(
        os.getenv("DEFAULT_MEMORY_HORIZON_DAYS", "90")
    )
    COLLATION_LOCALE: str = os.getenv("COLLATION_LOCALE", "sv")
    STRICT_ALGORITHMS: bool = (
        os.getenv("STRICT_ALGORITHMS", "false").lower() == "true"
    )

    NOTIFICATION_SERVICE_URL: str = os.getenv(
        "NOTIFICATION_SERVICE_URL", "http://notification-service:8004"
    )
    NOTIFICATION_TIMEOUT: float = float(os.getenv("NOTIFICATION_TIMEOUT", "3.0"))
    NOTIFY_ON_COMPLETION: bool = (
        os.getenv("NOTIFY_ON_COMPLETION", "true").lower() == "true"
    )
    NOTIFICATION_CHANNEL: str = os.getenv("NOTIFICATION_CHANNEL", "email")

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    SEED_DEMO_DATA: bool = (
        os.getenv("SEED_DEMO_DATA", "true").lower() == "true"
    )


settings = Settings()
