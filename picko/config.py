"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the Picko outfit-advice service."""
    model_config = SettingsConfigDict(env_prefix="PICKO_", extra="ignore")

    # generation API
    newell_api_url: str = "https://newell.fastshot.ai"
    project_id: str = "70f2e5c3-28e1-4e0a-88de-548110d8b628"
    generation_max_tokens: int = 400
    generation_temperature: float = 0.7
    generation_timeout_seconds: float = 60.0

    # weather provider
    weather_api_url: str = "https://api.open-meteo.com/v1/forecast"
    geocoding_api_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    weather_timeout_seconds: float = 10.0

    # key-value store backing the recommendation cache and preferences
    store_redis_url: str | None = None
    store_prefix: str = "picko:"
    cache_ttl_hours: float = 12.0

    api_key: str | None = None
    log_level: str = "INFO"

    @field_validator("newell_api_url", "weather_api_url", "geocoding_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @property
    def cache_ttl_ms(self) -> int:
        """Recommendation cache window in epoch milliseconds."""
        return int(self.cache_ttl_hours * 60 * 60 * 1000)


settings = Settings()


if __name__ == "__main__":
    logger.logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
