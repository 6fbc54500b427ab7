"""Health endpoints."""

from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from serbia_weather import __version__
from serbia_weather.dependencies import get_http_client, get_widget
from serbia_weather.models import DetailedHealthResponse, HealthResponse
from serbia_weather.state_managers import WeatherWidget

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic liveness check."""
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    client: httpx.AsyncClient = Depends(get_http_client),
    widget: WeatherWidget = Depends(get_widget),
):
    """Readiness probe - can the widget serve data?

    Uses the widget's own state and makes no upstream calls:
    - HTTP client open
    - widget mounted with its refresh timer running
    - last weather fetch succeeded

    **Returns:**
    - 200: ready
    - 503: a check failed
    """
    checks = {
        "http_client": "failed" if client.is_closed else "ok",
        "widget": "ok" if widget.is_mounted else "not_mounted",
    }

    if widget.weather is not None:
        checks["weather_api"] = "ok"
    elif widget.is_loading:
        checks["weather_api"] = "loading"
    else:
        checks["weather_api"] = f"failed: {widget.error_message}"

    all_healthy = all(value == "ok" for value in checks.values())

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content=DetailedHealthResponse(
            status="healthy" if all_healthy else "unhealthy",
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
