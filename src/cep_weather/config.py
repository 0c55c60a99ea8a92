"""Application configuration management."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    app_host: str = Field(default="0.0.0.0", description="Server bind host")
    gateway_port: int = Field(default=8080, description="Edge gateway bind port")
    orchestrator_port: int = Field(default=8081, description="Orchestrator bind port")

    # Downstream orchestrator, as seen from the gateway
    orchestrator_url: str = Field(
        default="http://localhost:8081",
        description="Base URL of the weather orchestrator",
    )
    orchestrator_timeout_seconds: float = Field(
        default=10.0,
        description="Gateway to orchestrator timeout in seconds",
        ge=0.1,
        le=30.0,
    )

    # Geocoding (ViaCEP)
    geocoder_url: str = Field(
        default="https://viacep.com.br/ws",
        description="ViaCEP API base URL",
    )
    geocoder_timeout_seconds: float = Field(
        default=5.0,
        description="Geocoding request timeout in seconds",
        ge=0.1,
        le=10.0,
    )

    # Weather (WeatherAPI)
    weather_api_url: str = Field(
        default="https://api.weatherapi.com/v1",
        description="WeatherAPI base URL",
    )
    weather_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="WeatherAPI key",
    )
    weather_api_timeout_seconds: float = Field(
        default=5.0,
        description="Weather request timeout in seconds",
        ge=0.1,
        le=10.0,
    )

    # Tracing settings
    tracing_endpoint: str | None = Field(
        default=None,
        description="OTLP/HTTP traces endpoint, e.g. http://localhost:4318/v1/traces",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
    )

    def require_weather_api_key(self) -> str:
        """Return the WeatherAPI key or fail startup when it is missing."""
        key = self.weather_api_key.get_secret_value().strip()
        if not key:
            raise ConfigurationError(
                "WEATHER_API_KEY is required. Configure it in .env or as an environment variable"
            )
        return key


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
