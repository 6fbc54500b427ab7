"""Unit tests for weather service."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from serbia_weather.exceptions import (
    CityNotFoundException,
    ErrorCode,
    WeatherAPIException,
    WeatherException,
)
from serbia_weather.models.weather import WeatherResult
from serbia_weather.services import weather_service


def make_ok_response(payload):
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json = lambda: payload
    mock_response.raise_for_status = lambda: None
    return mock_response


def make_error_response(status_code: int, text: str):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.text = text
    error = httpx.HTTPStatusError(f"{status_code} error", request=MagicMock(), response=mock_response)

    def raise_for_status():
        raise error

    mock_response.raise_for_status = raise_for_status
    return mock_response


@pytest.mark.asyncio
async def test_fetch_current_weather_success(mock_http_client, mock_settings, mock_weather_response):
    """Test successful weather data fetch."""
    mock_http_client.get.return_value = make_ok_response(mock_weather_response)

    result = await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert isinstance(result, WeatherResult)
    assert result.city == "Novi Sad"
    assert result.temperature == 21.4
    assert result.condition == "Clear"
    assert result.humidity == 58
    assert result.pressure == 1017
    mock_http_client.get.assert_called_once()


@pytest.mark.asyncio
async def test_fetch_current_weather_query_params(mock_http_client, mock_settings, mock_weather_response):
    """City is scoped to the configured country and units are metric."""
    mock_http_client.get.return_value = make_ok_response(mock_weather_response)

    await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    call_args = mock_http_client.get.call_args
    assert call_args.args[0] == mock_settings.weather_api_url
    params = call_args.kwargs["params"]
    assert params["q"] == "Novi Sad,RS"
    assert params["appid"] == "test-weather-key"
    assert params["units"] == "metric"


def test_build_query_params_uses_country_code(mock_settings):
    settings = mock_settings.model_copy(update={"weather_country_code": "ME"})

    params = weather_service.build_query_params("Podgorica", settings)

    assert params["q"] == "Podgorica,ME"


@pytest.mark.asyncio
async def test_fetch_current_weather_city_not_found(mock_http_client, mock_settings):
    """404 from the API becomes CityNotFoundException."""
    mock_http_client.get.return_value = make_error_response(404, '{"cod":"404","message":"city not found"}')

    with pytest.raises(CityNotFoundException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Zzzyx", mock_settings)

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == ErrorCode.CITY_NOT_FOUND
    assert exc_info.value.city == "Zzzyx"
    assert exc_info.value.details["city"] == "Zzzyx"


@pytest.mark.asyncio
async def test_fetch_current_weather_api_error(mock_http_client, mock_settings):
    """Other error statuses become WeatherAPIException with the upstream status."""
    mock_http_client.get.return_value = make_error_response(401, "Invalid API key")

    with pytest.raises(WeatherAPIException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert not isinstance(exc_info.value, CityNotFoundException)
    assert exc_info.value.status_code == 401
    assert "401" in str(exc_info.value)
    assert exc_info.value.details["api_response"] == "Invalid API key"


@pytest.mark.asyncio
async def test_fetch_current_weather_network_error(mock_http_client, mock_settings):
    """Test network error during weather fetch."""
    mock_http_client.get.side_effect = httpx.ConnectError("Connection failed")

    with pytest.raises(WeatherException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert exc_info.value.details["error_type"] == "network_error"
    assert "Failed to fetch weather data" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_current_weather_timeout(mock_http_client, mock_settings):
    mock_http_client.get.side_effect = httpx.ReadTimeout("Request timed out")

    with pytest.raises(WeatherException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert exc_info.value.details["error_type"] == "network_error"


@pytest.mark.asyncio
async def test_fetch_current_weather_invalid_payload(mock_http_client, mock_settings):
    """A 200 with an unexpected body is a parsing error."""
    mock_http_client.get.return_value = make_ok_response({"invalid": "data"})

    with pytest.raises(WeatherException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert "Failed to process weather data" in str(exc_info.value)
    assert exc_info.value.details["error_type"] == "parsing_error"


@pytest.mark.asyncio
async def test_fetch_current_weather_non_json_body(mock_http_client, mock_settings):
    mock_response = make_ok_response(None)

    def broken_json():
        raise json.JSONDecodeError("Expecting value", "<html>", 0)

    mock_response.json = broken_json
    mock_http_client.get.return_value = mock_response

    with pytest.raises(WeatherException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert exc_info.value.details["error_type"] == "parsing_error"


@pytest.mark.asyncio
async def test_fetch_current_weather_over_transport(mock_transport, upstream, mock_settings):
    """End to end through a real AsyncClient and the fake upstream."""
    async with httpx.AsyncClient(transport=mock_transport) as client:
        result = await weather_service.fetch_current_weather(client, "Niš", mock_settings)

    assert result.city == "Niš"
    assert upstream.queried_cities() == ["Niš,RS"]


@pytest.mark.asyncio
async def test_fetch_current_weather_defaults_to_singleton_settings(mock_http_client, mock_settings, monkeypatch):
    monkeypatch.setattr(weather_service, "get_settings", lambda: mock_settings)
    mock_http_client.get = AsyncMock(side_effect=httpx.ConnectError("down"))

    with pytest.raises(WeatherException):
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad")

    assert mock_http_client.get.call_args.kwargs["params"]["appid"] == "test-weather-key"


@pytest.mark.asyncio
async def test_fetch_current_weather_invalid_url(mock_http_client, mock_settings):
    """An unusable endpoint URL is reported like a network error."""
    mock_http_client.get.side_effect = httpx.InvalidURL("Invalid port: ':1'")

    with pytest.raises(WeatherException) as exc_info:
        await weather_service.fetch_current_weather(mock_http_client, "Novi Sad", mock_settings)

    assert exc_info.value.details["error_type"] == "network_error"
