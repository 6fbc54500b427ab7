"""Middleware configuration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from serbia_weather.config import Settings
from serbia_weather.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# Limits are declared per route with @limiter.limit
limiter = Limiter(key_func=get_remote_address)


def setup_middleware(app: FastAPI, settings: Settings) -> Limiter:
    """Configure CORS and the rate limiter.

    Returns:
        Limiter instance stored on app.state
    """
    log_with_context(
        logger,
        "info",
        "Configuring CORS middleware",
        origins=settings.cors_origins,
        event_type="security_config",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter

    return limiter
