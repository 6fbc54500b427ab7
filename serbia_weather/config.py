import json
from functools import cached_property
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from serbia_weather.exceptions import ConfigurationException, ErrorCode
from serbia_weather.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent  # serbia-weather/
DATA_DIR = Path(__file__).resolve().parent / "data"

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class Settings(BaseSettings):
    """Application settings with validation.

    Only the weather API key is required. Everything else has a default
    suitable for running the widget locally.
    """

    # API server settings
    api_host: str = Field(min_length=1, default="127.0.0.1", description="API server host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="API server port")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:8000", "http://127.0.0.1:8000"],
        description="Origins allowed to call the API from a browser",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # Weather API
    weather_api_key: str = Field(min_length=1, description="OpenWeatherMap API key")
    weather_api_url: str = Field(default=OPENWEATHER_URL, pattern=r"^https?://", description="Current weather URL")
    weather_country_code: str = Field(default="RS", description="ISO country code appended to every query")
    http_timeout_seconds: float = Field(gt=0, default=10.0, description="Read timeout for outbound requests")

    # Widget behaviour
    default_city: str = Field(default="Novi Sad", description="City shown when the widget mounts")
    refresh_interval_seconds: float = Field(gt=0, default=600.0, description="Auto-refresh period")
    blur_grace_seconds: float = Field(ge=0, default=0.2, description="Delay before blur closes the dropdown")

    # Static data files
    cities_file: Path = Field(default=DATA_DIR / "cities.json", description="JSON array of city names")
    city_images_file: Path = Field(default=DATA_DIR / "city_images.json", description="JSON city -> image URL map")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    def _read_json(self, file_path: Path, event_prefix: str) -> object:
        if not file_path.exists():
            log_with_context(
                logger,
                "error",
                "Data file not found",
                file_path=str(file_path),
                event_type=f"{event_prefix}_missing",
            )
            raise ConfigurationException(
                f"Data file not found: {file_path}",
                details={"file_path": str(file_path)},
            )

        try:
            return json.loads(file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            log_with_context(
                logger,
                "error",
                "Invalid JSON in data file",
                file_path=str(file_path),
                error=str(e),
                event_type=f"{event_prefix}_invalid",
            )
            raise ConfigurationException(
                f"{file_path.name} contains invalid JSON: {e}",
                code=ErrorCode.CONFIG_INVALID,
                details={"file_path": str(file_path)},
            ) from e

    @cached_property
    def cities(self) -> list[str]:
        """Ordered list of known city names, read once per Settings instance.

        Raises:
            ConfigurationException: If the file is missing, invalid JSON or not an array of strings
        """
        data = self._read_json(self.cities_file, "config_cities")
        if not isinstance(data, list) or not all(isinstance(city, str) for city in data):
            raise ConfigurationException(
                f"{self.cities_file.name} must contain a JSON array of strings",
                code=ErrorCode.CONFIG_INVALID,
            )
        return data

    @cached_property
    def city_images(self) -> dict[str, str]:
        """City name to background image URL mapping, with a required 'default' entry.

        Raises:
            ConfigurationException: If the file is missing, invalid JSON or has no 'default' key
        """
        data = self._read_json(self.city_images_file, "config_city_images")
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"{self.city_images_file.name} must contain a JSON object",
                code=ErrorCode.CONFIG_INVALID,
            )
        if "default" not in data:
            raise ConfigurationException(
                f"{self.city_images_file.name} must define a 'default' image",
                code=ErrorCode.CONFIG_INVALID,
            )
        return data

    @field_validator("api_host", "weather_api_key", "default_city", mode="after")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Strip whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("value must not be empty")
        return v

    @field_validator("weather_country_code", mode="after")
    @classmethod
    def validate_country_code(cls, v: str) -> str:
        """Ensure the country code is a two-letter ISO code."""
        v = v.strip().upper()
        if len(v) != 2 or not v.isalpha():
            raise ValueError("weather_country_code must be a two-letter ISO 3166 code")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level is a standard logging level name."""
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return v


# Singleton settings instance
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Avoids re-reading the .env file on every request. Use with FastAPI's
    Depends().
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
