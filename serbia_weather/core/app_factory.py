"""Application factory for creating and configuring the FastAPI app."""

from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from serbia_weather import __version__
from serbia_weather.config import Settings, get_settings
from serbia_weather.core.lifespan import lifespan
from serbia_weather.core.middleware import setup_middleware
from serbia_weather.middleware.error_handlers import register_error_handlers
from serbia_weather.routers import health_router, view_router, weather_router, widget_router

STATIC_DIR = Path(__file__).parent.parent / "static"


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings instance (defaults to singleton)
        transport: Optional transport for the shared HTTP client (tests)

    Returns:
        Configured FastAPI application instance
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Serbia Weather",
        description="""
        ☀️ **Serbia Weather** - current conditions for Serbian cities

        ## Widget
        - `/` - the widget page
        - `/api/widget` - widget state; POST events to `/api/widget/{input,focus,blur,key,select,search}`

        ## Data
        - `/api/weather/current?city=` - direct lookup (OpenWeatherMap)
        - `/api/cities?q=` - autocomplete

        ## 📊 Health
        - `/health` - liveness
        - `/health/ready` - readiness

        ## ⚡ Rate Limits
        - `/api/weather/current`: 60 requests/minute per IP
        """,
        version=__version__,
        lifespan=lifespan,
        license_info={
            "name": "MIT",
        },
    )
    app.state.settings = settings
    app.state.http_transport = transport

    setup_middleware(app, settings)
    register_error_handlers(app)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # HTML page and HTMX fragments - no prefix, hidden from the API docs
    app.include_router(view_router.router, tags=["views"], include_in_schema=False)
    app.include_router(health_router.router, tags=["health"])
    app.include_router(widget_router.router, prefix="/api/widget", tags=["widget"])
    app.include_router(weather_router.router, prefix="/api", tags=["weather"])

    return app
