"""Application lifespan management."""

import os
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI

from serbia_weather import __version__
from serbia_weather.config import Settings
from serbia_weather.logging_config import get_logger, log_with_context
from serbia_weather.middleware.logging_middleware import redact_sensitive_data
from serbia_weather.state_managers import WeatherWidget

logger = get_logger(__name__)


async def log_request(request: httpx.Request) -> None:
    """Event hook to log outbound requests with redacted API keys."""
    log_with_context(
        logger,
        "info",
        "HTTP Request",
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="http_request",
    )


async def log_response(response: httpx.Response) -> None:
    """Event hook to log responses with redacted API keys.

    The body is not read here; image checks only need the headers.
    """
    log_with_context(
        logger,
        "info",
        "HTTP Response",
        status_code=response.status_code,
        url=redact_sensitive_data(str(response.request.url)),
        event_type="http_response",
    )


def create_http_client(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create the shared HTTP client with pooling, timeouts and logging hooks.

    Args:
        settings: Settings providing the read timeout
        transport: Optional transport override (tests use httpx.MockTransport)
    """
    event_hooks: dict[str, list[Callable[..., Any]]] = {
        "request": [log_request],
        "response": [log_response],
    }
    timeout = httpx.Timeout(
        connect=5.0,
        read=settings.http_timeout_seconds,
        write=5.0,
        pool=5.0,
    )
    limits = httpx.Limits(
        max_keepalive_connections=5,
        max_connections=10,
        keepalive_expiry=30.0,
    )

    if transport is not None:
        return httpx.AsyncClient(
            timeout=timeout,
            limits=limits,
            follow_redirects=True,
            transport=transport,
            event_hooks=event_hooks,
        )

    proxy = os.getenv("HTTPS_PROXY") or os.getenv("HTTP_PROXY")
    if proxy:
        log_with_context(
            logger,
            "info",
            "Using HTTP proxy for outbound requests",
            proxy=redact_sensitive_data(proxy),
            event_type="proxy_config",
        )

    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        follow_redirects=True,
        proxy=proxy or None,
        event_hooks=event_hooks,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the HTTP client, mount the widget, and tear both down on shutdown.

    Exceptions raised while the app is running are logged and re-raised so
    cleanup still happens.
    """
    settings: Settings = app.state.settings

    log_with_context(
        logger,
        "info",
        "Starting Serbia Weather application",
        version=__version__,
        event_type="app_startup",
    )

    client = create_http_client(settings, getattr(app.state, "http_transport", None))
    app.state.http_client = client

    widget = WeatherWidget(client, settings)
    app.state.widget = widget
    await widget.initialize()

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down Serbia Weather application",
            event_type="app_shutdown",
        )
        await widget.cleanup()
        await client.aclose()
        log_with_context(
            logger,
            "info",
            "HTTP client closed",
            event_type="http_client_cleanup",
        )
