"""Pytest configuration and shared fixtures."""

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from serbia_weather.config import Settings

TEST_CITIES = ["Beograd", "Novi Sad", "Niš", "Kragujevac", "Novi Pazar", "Subotica", "Sremski Karlovci"]

TEST_CITY_IMAGES = {
    "Beograd": "https://img.test/beograd.jpg",
    "Novi Sad": "https://img.test/novi-sad.jpg",
    "Niš": "https://img.test/broken.jpg",
    "default": "https://img.test/default.jpg",
}

WEATHER_HOST = "api.openweathermap.org"


def make_weather_payload(city: str = "Novi Sad", condition: str = "Clear", temp: float = 21.4) -> dict:
    """OpenWeatherMap current weather payload for a city."""
    return {
        "coord": {"lon": 19.8335, "lat": 45.2517},
        "weather": [{"id": 800, "main": condition, "description": "clear sky", "icon": "01d"}],
        "base": "stations",
        "main": {
            "temp": temp,
            "feels_like": temp - 0.6,
            "temp_min": temp - 2,
            "temp_max": temp + 1,
            "pressure": 1017,
            "humidity": 58,
        },
        "visibility": 10000,
        "wind": {"speed": 3.6, "deg": 320},
        "clouds": {"all": 0},
        "dt": 1760700000,
        "sys": {"country": "RS", "sunrise": 1760676000, "sunset": 1760715000},
        "timezone": 7200,
        "id": 3194360,
        "name": city,
        "cod": 200,
    }


class FakeUpstream:
    """Stand-in for OpenWeatherMap and the image host behind httpx.MockTransport.

    Unknown cities (anything starting with "Zzz") answer 404. weather_status
    forces a status for every weather call, delays slows down single cities,
    and network_down makes every request fail to connect.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.weather_status: int | None = None
        self.delays: dict[str, float] = {}
        self.network_down = False

    @property
    def weather_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == WEATHER_HOST]

    @property
    def image_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host != WEATHER_HOST]

    def queried_cities(self) -> list[str]:
        return [r.url.params["q"] for r in self.weather_requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_down:
            raise httpx.ConnectError("Connection refused", request=request)
        if request.url.host == WEATHER_HOST:
            return await self._weather(request)
        return self._image(request)

    async def _weather(self, request: httpx.Request) -> httpx.Response:
        city = request.url.params["q"].rsplit(",", 1)[0]
        delay = self.delays.get(city)
        if delay:
            await asyncio.sleep(delay)
        if self.weather_status is not None:
            return httpx.Response(self.weather_status, json={"cod": self.weather_status, "message": "forced"})
        if city.startswith("Zzz"):
            return httpx.Response(404, json={"cod": "404", "message": "city not found"})
        return httpx.Response(200, json=make_weather_payload(city))

    def _image(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("broken.jpg"):
            return httpx.Response(404, text="not found")
        return httpx.Response(200, content=b"\xff\xd8\xff", headers={"content-type": "image/jpeg"})


@pytest.fixture
def data_files(tmp_path):
    """City list and image map written to temporary JSON files."""
    cities_file = tmp_path / "cities.json"
    images_file = tmp_path / "city_images.json"
    cities_file.write_text(json.dumps(TEST_CITIES, ensure_ascii=False), encoding="utf-8")
    images_file.write_text(json.dumps(TEST_CITY_IMAGES, ensure_ascii=False), encoding="utf-8")
    return cities_file, images_file


@pytest.fixture
def mock_settings(data_files):
    """Settings instance with test values and fast timings."""
    cities_file, images_file = data_files
    return Settings(
        _env_file=None,
        api_host="127.0.0.1",
        api_port=8000,
        weather_api_key="test-weather-key",
        default_city="Novi Sad",
        refresh_interval_seconds=600,
        blur_grace_seconds=0.01,
        cities_file=cities_file,
        city_images_file=images_file,
    )


@pytest.fixture
def upstream():
    """Fake weather API and image host."""
    return FakeUpstream()


@pytest.fixture
def mock_transport(upstream):
    """httpx transport routing every request to the fake upstream."""
    return httpx.MockTransport(upstream.handler)


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for service-level tests."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get = AsyncMock()
    mock_client.aclose = AsyncMock()
    return mock_client


@pytest.fixture
def mock_weather_response():
    """Mock OpenWeatherMap API response."""
    return make_weather_payload("Novi Sad")
