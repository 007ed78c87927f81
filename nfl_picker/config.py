"""Configuration management for NFL Picker.

Settings are loaded from environment variables using pydantic-settings.
Provider credentials are required: a missing key fails validation at startup,
which is the only condition treated as fatal.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Required secrets (startup fails if missing):
    - MYSPORTSFEEDS_API_KEY: MySportsFeeds statistics API key
    - OPENWEATHER_API_KEY: OpenWeatherMap API key

    Optional settings (have defaults):
    - ENVIRONMENT: Runtime environment (default: development)
    - ENABLE_WEATHER_UPDATES: Collect weather for host venues (default: true)
    - HOME_FIELD_ADVANTAGE: Home bonus as a fraction (default: 0.03)
    """

    # Required secrets
    mysportsfeeds_api_key: str = Field(..., min_length=1, description="MySportsFeeds API key")
    openweather_api_key: str = Field(..., min_length=1, description="OpenWeatherMap API key")

    environment: str = Field(default="development")

    # Statistics provider
    mysportsfeeds_base_url: str = Field(default="https://api.mysportsfeeds.com/v2.1/pull/nfl")
    mysportsfeeds_rate_limit: int = Field(default=100, ge=1, description="Requests per minute")
    mysportsfeeds_timeout: float = Field(default=30.0, gt=0)
    mysportsfeeds_request_spacing: float = Field(default=0.1, ge=0)

    # Weather provider
    openweather_base_url: str = Field(default="https://api.openweathermap.org/data/2.5")
    openweather_rate_limit: int = Field(default=60, ge=1, description="Requests per minute")
    openweather_timeout: float = Field(default=15.0, gt=0)
    openweather_request_spacing: float = Field(default=0.2, ge=0)

    # Collection
    enable_weather_updates: bool = Field(default=True)
    weather_batch_size: int = Field(default=5, ge=1, le=50)
    week_concurrency: int = Field(default=2, ge=1, le=18)

    # Prediction model
    home_field_advantage: float = Field(default=0.03, ge=0, le=0.25)
    model_version: str = Field(default="1.0.0")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    @property
    def log_mode(self) -> str:
        """structlog renderer mode derived from the environment."""
        return "production" if self.environment == "production" else "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance (singleton).

    Returns:
        Settings instance with validated configuration

    Raises:
        ValidationError: If required credentials are missing or invalid
    """
    return Settings()
