"""Background image selection for the widget."""

import httpx

from serbia_weather.logging_config import get_logger, log_with_context

DEFAULT_IMAGE_KEY = "default"

logger = get_logger(__name__)


def resolve_image_url(city: str, images: dict[str, str]) -> str:
    """Image URL for a city, or the default entry when the city is not mapped."""
    return images.get(city) or images[DEFAULT_IMAGE_KEY]


async def probe_image(client: httpx.AsyncClient, url: str) -> bool:
    """Check that an image URL can actually be loaded.

    Only the response headers are read. Failures are logged and reported
    as False, never raised.

    Args:
        client: Shared HTTP client
        url: Image URL to check

    Returns:
        True if the URL answers 2xx with an image/* content type
    """
    try:
        async with client.stream("GET", url) as response:
            content_type = response.headers.get("content-type", "")
            if response.is_success and content_type.startswith("image/"):
                return True
            log_with_context(
                logger,
                "warning",
                "Background image not loadable",
                url=url,
                status_code=response.status_code,
                content_type=content_type,
                event_type="image_unavailable",
            )
            return False
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log_with_context(
            logger,
            "warning",
            "Background image request failed",
            url=url,
            error=str(e),
            error_type=type(e).__name__,
            event_type="image_request_error",
        )
        return False


class BackgroundImage:
    """Current background image URL and whether it is still being checked."""

    def __init__(self, url: str = ""):
        self.url = url
        self.is_loading = False
