"""FastAPI dependencies for dependency injection."""

import httpx
from fastapi import Request

from serbia_weather.config import Settings, get_settings
from serbia_weather.state_managers import WeatherWidget


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared HTTP client from app state.

    Raises:
        RuntimeError: If HTTP client is not initialized.
    """
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)

    if client is None:
        raise RuntimeError("HTTP client not initialized. This should never happen.")

    return client


async def get_widget(request: Request) -> WeatherWidget:
    """
    Get the mounted weather widget from app state.

    Raises:
        RuntimeError: If the widget has not been mounted.
    """
    widget: WeatherWidget | None = getattr(request.app.state, "widget", None)

    if widget is None:
        raise RuntimeError("Weather widget not mounted.")

    return widget


async def get_app_settings(request: Request) -> Settings:
    """
    Get the Settings the application was created with.

    Falls back to the process-wide singleton when the app holds none.
    """
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()
