"""Weather service for OpenWeatherMap API integration."""

import httpx
from pydantic import ValidationError

from serbia_weather.config import Settings, get_settings
from serbia_weather.exceptions import CityNotFoundException, WeatherAPIException, WeatherException
from serbia_weather.logging_config import get_logger, log_with_context
from serbia_weather.models.weather import CurrentWeather, WeatherResult

logger = get_logger(__name__)


def build_query_params(city: str, settings: Settings) -> dict[str, str]:
    """Query parameters for one current-weather lookup, scoped to the configured country."""
    return {
        "q": f"{city},{settings.weather_country_code}",
        "appid": settings.weather_api_key,
        "units": "metric",
    }


async def fetch_current_weather(
    client: httpx.AsyncClient,
    city: str,
    settings: Settings | None = None,
) -> WeatherResult:
    """Get current weather for a city from OpenWeatherMap.

    Issues exactly one GET request; nothing is cached.

    Args:
        client: Shared HTTP client for making requests
        city: City name as typed or selected by the user
        settings: Settings instance (defaults to singleton)

    Returns:
        WeatherResult parsed from the API response

    Raises:
        CityNotFoundException: If the API answers 404
        WeatherAPIException: If the API answers any other non-2xx status
        WeatherException: On network errors or a malformed response
    """
    if settings is None:
        settings = get_settings()

    params = build_query_params(city, settings)

    try:
        response = await client.get(settings.weather_api_url, params=params)
        response.raise_for_status()
        data = CurrentWeather.model_validate(response.json())
        return WeatherResult.from_openweather(data)

    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        log_with_context(
            logger,
            "warning",
            "Weather API returned error status",
            city=city,
            status_code=status_code,
            event_type="weather_api_error",
        )
        if status_code == 404:
            raise CityNotFoundException(city) from e
        raise WeatherAPIException(
            f"Weather API request failed (HTTP {status_code}): {e.response.text}",
            status_code=status_code,
            details={"api_response": e.response.text, "city": city},
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log_with_context(
            logger,
            "warning",
            "Weather API unreachable",
            city=city,
            error=str(e),
            error_type=type(e).__name__,
            event_type="weather_network_error",
        )
        raise WeatherException(
            f"Failed to fetch weather data: {str(e)}",
            details={"error_type": "network_error", "city": city},
        ) from e
    except (ValidationError, ValueError) as e:
        log_with_context(
            logger,
            "warning",
            "Weather API returned an unexpected payload",
            city=city,
            error=str(e),
            event_type="weather_parse_error",
        )
        raise WeatherException(
            f"Failed to process weather data: {str(e)}",
            details={"error_type": "parsing_error", "city": city},
        ) from e
