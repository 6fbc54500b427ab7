"""Serbia Weather models"""

from serbia_weather.models.base_models import (
    CityListResponse,
    CitySelection,
    DetailedHealthResponse,
    HealthResponse,
    KeyInput,
    KeyResponse,
    SearchRequest,
    TextInput,
    WidgetSnapshot,
)
from serbia_weather.models.weather import CurrentWeather, WeatherResult, weather_icon

__all__ = [
    "CityListResponse",
    "CitySelection",
    "CurrentWeather",
    "DetailedHealthResponse",
    "HealthResponse",
    "KeyInput",
    "KeyResponse",
    "SearchRequest",
    "TextInput",
    "WeatherResult",
    "WidgetSnapshot",
    "weather_icon",
]
