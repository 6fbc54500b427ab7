"""Logging helpers with sensitive data redaction."""

import re

# Query parameters whose values never reach the logs
SENSITIVE_PARAMS = [
    "appid",
    "api_key",
    "apikey",
    "token",
    "key",
]

_SENSITIVE_PATTERN = re.compile(rf"\b({'|'.join(SENSITIVE_PARAMS)})=([^&\s\"]+)", re.IGNORECASE)


def redact_sensitive_data(url: str) -> str:
    """Redact sensitive query parameters from URL."""
    return _SENSITIVE_PATTERN.sub(r"\1=***REDACTED***", url)
