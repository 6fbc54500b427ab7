"""Weather and city lookup API routes."""

import httpx
from fastapi import APIRouter, Depends, Query, Request

from serbia_weather.config import Settings
from serbia_weather.core.middleware import limiter
from serbia_weather.dependencies import get_app_settings, get_http_client
from serbia_weather.models import CityListResponse, WeatherResult
from serbia_weather.services import weather_service
from serbia_weather.services.autocomplete import filter_cities

router = APIRouter()


@router.get(
    "/weather/current",
    response_model=WeatherResult,
    summary="Get current weather for a city",
    description="""
    Fetches current conditions for a Serbian city from OpenWeatherMap.

    Nothing is cached: every call is one upstream request.

    **Rate Limited:** 60 requests/minute
    """,
    responses={
        200: {
            "description": "Successful response",
            "content": {
                "application/json": {
                    "example": {
                        "city": "Novi Sad",
                        "temperature": 18.4,
                        "feels_like": 17.9,
                        "humidity": 62,
                        "pressure": 1016,
                        "description": "scattered clouds",
                        "condition": "Clouds",
                        "wind_speed": 3.1,
                    }
                }
            },
        },
        404: {"description": "City not found"},
        502: {"description": "Weather API error"},
    },
)
@limiter.limit("60/minute")
async def get_current_weather(
    request: Request,
    city: str = Query(min_length=1, max_length=100, description="City name"),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
):
    """Get current weather; failures are rendered by the widget exception handler."""
    return await weather_service.fetch_current_weather(client, city, settings)


@router.get("/cities", response_model=CityListResponse, summary="Autocomplete city names")
async def list_cities(
    q: str = Query(default="", max_length=100, description="Text typed so far"),
    settings: Settings = Depends(get_app_settings),
):
    """Cities containing q (case-insensitive, at least two characters), in list order."""
    return CityListResponse(query=q, cities=filter_cities(q, settings.cities))
