"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Feature flags
    use_mock_data: bool = False  # Canned data for every provider call

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # External APIs
    finnhub_api_key: str = ""
    price_provider: str = "finnhub"  # "finnhub" or "yahoo"
    sec_user_agent: str = "finsight/1.0 contact@example.com"  # Required by SEC

    # Provider behaviour
    request_timeout: float = 10.0  # seconds, applied to every provider call
    ticker_catalog_ttl_hours: float = 24.0

    @property
    def ticker_catalog_ttl_seconds(self) -> float:
        return self.ticker_catalog_ttl_hours * 3600


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
