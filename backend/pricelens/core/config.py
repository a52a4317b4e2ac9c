"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PriceLens Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Price data provider: "alphavantage" or "yahoo"
    price_provider: str = "yahoo"
    upstream_timeout_seconds: float = 15.0

    # Alpha Vantage
    alpha_vantage_api_key: Optional[str] = None
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    alpha_vantage_output_size: str = "compact"  # compact = last 100 points

    # Symbol policy
    # Unset: ".NS" for yahoo, none for alphavantage. Empty string disables suffixing
    default_market_suffix: Optional[str] = None
    crypto_quote_currency: str = "USD"
    default_currency: str = "USD"

    # Report shape
    ema_windows: list[int] = [5, 9]
    sma_windows: list[int] = [50]
    rsi_period: int = 14
    bollinger_period: int = 20
    macd_history_length: int = 30


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
