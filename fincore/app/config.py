"""
Application configuration module.
Loads environment variables and provides core-wide settings.
"""
from pathlib import Path

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Get project root (two levels up from this file)
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """
    Core settings loaded from environment variables or .env file.
    (Note: Environment variables take precedence over .env file)
    """
    # Logging
    LOG_LEVEL: str = "INFO"

    # Currency
    BASE_CURRENCY: str = "CZK"  # ISO 4217 code every rate table is expressed against by default

    # Amortization
    MAX_SCHEDULE_PERIODS: int = 1200  # 100 years of monthly payments

    # Portfolio
    PERCENT_DECIMALS: int = 2  # Rounding applied to allocation percentages

    model_config = ConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        case_sensitive=True,
        env_file_encoding='utf-8',
        extra='ignore'
        )


def get_settings() -> Settings:
    """
    Get settings instance.

    Returns:
        Settings: Core settings
    """
    return Settings()
