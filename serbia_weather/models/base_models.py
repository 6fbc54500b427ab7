"""Pydantic models for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from serbia_weather.models.weather import WeatherResult


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response with dependency status."""

    status: str = Field(..., description="Overall health status: healthy or unhealthy")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(..., description="Current server timestamp")
    checks: dict[str, str] = Field(..., description="Individual health check results")


class CityListResponse(BaseModel):
    """Cities matching an autocomplete query."""

    query: str
    cities: list[str]


class TextInput(BaseModel):
    """New content of the city input box."""

    text: str = Field(max_length=100)


class KeyInput(BaseModel):
    """A key pressed while the city input has focus."""

    key: str = Field(max_length=32, description="DOM KeyboardEvent.key value")


class CitySelection(BaseModel):
    """A city picked from the dropdown."""

    city: str = Field(min_length=1, max_length=100)


class SearchRequest(BaseModel):
    """Search submission; without a city the current input text is used."""

    city: str | None = Field(default=None, max_length=100)


class WidgetSnapshot(BaseModel):
    """Complete view state of the weather widget."""

    city: str
    filtered_cities: list[str]
    selected_index: int
    show_dropdown: bool
    weather: WeatherResult | None
    icon: str | None
    error_message: str
    is_loading: bool
    last_updated: datetime | None
    background_image: str
    is_image_loading: bool


class KeyResponse(BaseModel):
    """Outcome of a key press plus the widget state after it."""

    handled: bool = Field(..., description="True when the browser should suppress the key's default action")
    widget: WidgetSnapshot
