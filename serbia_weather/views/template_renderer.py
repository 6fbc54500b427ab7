"""Template rendering utilities for HTML views."""

import json
from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from serbia_weather.state_managers import WeatherWidget

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# Client-side event that makes the page re-fetch the panel, dropdown and background
WIDGET_CHANGED_EVENT = "widget-changed"


def widget_changed_headers(widget: WeatherWidget) -> dict[str, str]:
    """HX-Trigger header announcing a state change, carrying the committed city."""
    return {"HX-Trigger": json.dumps({WIDGET_CHANGED_EVENT: {"city": widget.city}})}


class TemplateRenderer:
    """Renders the widget page and its fragments from the widget state."""

    @staticmethod
    def render_index(request: Request, widget: WeatherWidget) -> HTMLResponse:
        """Render the full widget page."""
        return templates.TemplateResponse(request, "index.html", {"widget": widget.snapshot()})

    @staticmethod
    def render_weather_tile(
        request: Request,
        widget: WeatherWidget,
        headers: dict[str, str] | None = None,
    ) -> HTMLResponse:
        """Render the weather panel: conditions, error banner or loading state.

        Args:
            request: FastAPI request object
            widget: Mounted weather widget
            headers: Extra response headers (e.g. HX-Trigger)
        """
        return templates.TemplateResponse(
            request,
            "tiles/weather.html",
            {"widget": widget.snapshot()},
            headers=headers,
        )

    @staticmethod
    def render_dropdown(
        request: Request,
        widget: WeatherWidget,
        headers: dict[str, str] | None = None,
    ) -> HTMLResponse:
        """Render the autocomplete dropdown (empty when hidden)."""
        return templates.TemplateResponse(
            request,
            "tiles/dropdown.html",
            {"widget": widget.snapshot()},
            headers=headers,
        )

    @staticmethod
    def render_background(request: Request, widget: WeatherWidget) -> HTMLResponse:
        """Render the background image layer with its loading indicator."""
        return templates.TemplateResponse(request, "tiles/background.html", {"widget": widget.snapshot()})
