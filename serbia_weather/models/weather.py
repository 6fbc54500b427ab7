"""Pydantic models for weather data."""

from pydantic import BaseModel, Field

DEFAULT_WEATHER_ICON = "🌤️"

WEATHER_ICONS: dict[str, str] = {
    "Clear": "☀️",
    "Clouds": "☁️",
    "Rain": "🌧️",
    "Snow": "❄️",
    "Thunderstorm": "⛈️",
    "Drizzle": "🌦️",
    "Mist": "🌫️",
    "Fog": "🌫️",
}


def weather_icon(condition: str) -> str:
    """Map a condition category ("Rain", "Clear", ...) to a display icon."""
    return WEATHER_ICONS.get(condition, DEFAULT_WEATHER_ICON)


class WeatherInfo(BaseModel):
    """Weather condition info from OpenWeatherMap."""

    main: str
    description: str


class MainInfo(BaseModel):
    """Main weather metrics from OpenWeatherMap."""

    temp: float
    feels_like: float
    humidity: int
    pressure: int


class WindInfo(BaseModel):
    """Wind information from OpenWeatherMap."""

    speed: float


class CurrentWeather(BaseModel):
    """Raw OpenWeatherMap current weather response.

    Only the fields the widget displays are declared; the rest of the
    payload is ignored.
    """

    name: str
    main: MainInfo
    weather: list[WeatherInfo] = Field(min_length=1)
    wind: WindInfo


class WeatherResult(BaseModel):
    """Simplified weather record shown by the widget."""

    city: str
    temperature: float
    feels_like: float
    humidity: int
    pressure: int
    description: str
    condition: str
    wind_speed: float

    @property
    def icon(self) -> str:
        """Display icon for the condition category."""
        return weather_icon(self.condition)

    @classmethod
    def from_openweather(cls, data: CurrentWeather) -> "WeatherResult":
        """Create WeatherResult from a validated OpenWeatherMap response."""
        return cls(
            city=data.name,
            temperature=data.main.temp,
            feels_like=data.main.feels_like,
            humidity=data.main.humidity,
            pressure=data.main.pressure,
            description=data.weather[0].description,
            condition=data.weather[0].main,
            wind_speed=data.wind.speed,
        )
