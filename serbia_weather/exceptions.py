"""Custom exceptions for the weather widget with HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    WIDGET_ERROR = "WIDGET_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    WEATHER_ERROR = "WEATHER_ERROR"
    WEATHER_API_ERROR = "WEATHER_API_ERROR"
    CITY_NOT_FOUND = "CITY_NOT_FOUND"

    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"


class WidgetException(Exception):
    """Base exception for widget errors with HTTP status code support.

    Everything raised on purpose inside the app derives from this class so
    the API error handler can render it consistently.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.WIDGET_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize widget exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class WeatherException(WidgetException):
    """Weather service errors (network failures, unparseable responses)."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.WEATHER_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class WeatherAPIException(WeatherException):
    """Weather API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int = 502, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.WEATHER_API_ERROR,
            status_code=status_code,
            details=details,
        )


class CityNotFoundException(WeatherAPIException):
    """Weather API does not know the requested city (HTTP 404)."""

    def __init__(self, city: str, details: dict[str, Any] | None = None):
        super().__init__(f"City not found: {city}", status_code=404, details={"city": city, **(details or {})})
        self.code = ErrorCode.CITY_NOT_FOUND
        self.city = city


class ConfigurationException(WidgetException):
    """Configuration errors (bad settings, broken data files)."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
