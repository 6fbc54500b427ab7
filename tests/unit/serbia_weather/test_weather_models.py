"""Unit tests for weather models."""

import pytest
from pydantic import ValidationError

from serbia_weather.models.weather import (
    DEFAULT_WEATHER_ICON,
    WEATHER_ICONS,
    CurrentWeather,
    WeatherResult,
    weather_icon,
)


def test_current_weather_ignores_extra_fields(mock_weather_response):
    """Only the displayed fields are required; the rest is ignored."""
    data = CurrentWeather.model_validate(mock_weather_response)

    assert data.name == "Novi Sad"
    assert data.main.humidity == 58
    assert data.weather[0].main == "Clear"
    assert data.wind.speed == 3.6


def test_current_weather_minimal_payload():
    data = CurrentWeather.model_validate(
        {
            "name": "Niš",
            "main": {"temp": 10, "feels_like": 8.5, "humidity": 80, "pressure": 1009},
            "weather": [{"main": "Rain", "description": "light rain"}],
            "wind": {"speed": 1.2},
        }
    )

    assert data.main.temp == 10.0
    assert data.weather[0].description == "light rain"


def test_current_weather_requires_condition(mock_weather_response):
    """An empty weather list is rejected."""
    mock_weather_response["weather"] = []

    with pytest.raises(ValidationError):
        CurrentWeather.model_validate(mock_weather_response)


def test_current_weather_missing_main(mock_weather_response):
    del mock_weather_response["main"]

    with pytest.raises(ValidationError):
        CurrentWeather.model_validate(mock_weather_response)


def test_weather_result_from_openweather(mock_weather_response):
    result = WeatherResult.from_openweather(CurrentWeather.model_validate(mock_weather_response))

    assert result.city == "Novi Sad"
    assert result.temperature == 21.4
    assert result.feels_like == pytest.approx(20.8)
    assert result.humidity == 58
    assert result.pressure == 1017
    assert result.description == "clear sky"
    assert result.condition == "Clear"
    assert result.wind_speed == 3.6
    assert result.icon == WEATHER_ICONS["Clear"]


@pytest.mark.parametrize("condition", ["Clear", "Clouds", "Rain", "Snow", "Thunderstorm", "Drizzle", "Mist", "Fog"])
def test_known_conditions_have_icons(condition):
    assert weather_icon(condition) != DEFAULT_WEATHER_ICON


@pytest.mark.parametrize("condition", ["Haze", "Tornado", "", "clear"])
def test_unknown_conditions_use_default_icon(condition):
    """Lookup is exact; anything else gets the default icon."""
    assert weather_icon(condition) == DEFAULT_WEATHER_ICON


def test_mist_and_fog_share_icon():
    assert weather_icon("Mist") == weather_icon("Fog")
