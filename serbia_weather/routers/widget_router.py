"""Widget event routes: the browser forwards input, focus, blur, keys and clicks here.

Every route answers with the widget snapshot as JSON, or with the HTML
fragment the event affects when called with format=html.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request

from serbia_weather.dependencies import get_widget
from serbia_weather.models import CitySelection, KeyInput, KeyResponse, SearchRequest, TextInput, WidgetSnapshot
from serbia_weather.state_managers import WeatherWidget
from serbia_weather.views.template_renderer import TemplateRenderer, widget_changed_headers

router = APIRouter()

ResponseFormat = Literal["json", "html"]
FORMAT_QUERY = Query(default="json", description="Response format")


@router.get("", response_model=WidgetSnapshot, summary="Get widget state")
async def get_widget_state(widget: WeatherWidget = Depends(get_widget)):
    """Current view state: search box, weather result or error, background."""
    return widget.snapshot()


@router.post("/input", summary="Input text changed")
async def update_input(
    request: Request,
    body: TextInput,
    widget: WeatherWidget = Depends(get_widget),
    format: ResponseFormat = FORMAT_QUERY,
):
    """Store the typed text and recompute the dropdown."""
    widget.set_text(body.text)
    if format == "html":
        return TemplateRenderer.render_dropdown(request, widget)
    return widget.snapshot()


@router.post("/focus", summary="Input gained focus")
async def focus_input(
    request: Request,
    widget: WeatherWidget = Depends(get_widget),
    format: ResponseFormat = FORMAT_QUERY,
):
    """Re-open the dropdown for the text already in the box."""
    widget.on_focus()
    if format == "html":
        return TemplateRenderer.render_dropdown(request, widget)
    return widget.snapshot()


@router.post("/blur", summary="Input lost focus")
async def blur_input(
    request: Request,
    widget: WeatherWidget = Depends(get_widget),
    format: ResponseFormat = FORMAT_QUERY,
):
    """Close the dropdown once the grace delay has passed.

    The response is sent after the delay so it reflects the closed dropdown;
    a click on an entry in the meantime is handled by its own request.
    """
    await widget.on_blur()
    if format == "html":
        return TemplateRenderer.render_dropdown(request, widget)
    return widget.snapshot()


@router.post("/key", summary="Key pressed in the search box")
async def press_key(
    request: Request,
    body: KeyInput,
    widget: WeatherWidget = Depends(get_widget),
    format: ResponseFormat = FORMAT_QUERY,
):
    """Move the dropdown cursor, commit the highlighted city (Enter) or close (Escape)."""
    city_before = widget.city
    handled = await widget.handle_key(body.key)
    if format == "html":
        headers = widget_changed_headers(widget) if widget.city != city_before else None
        return TemplateRenderer.render_dropdown(request, widget, headers=headers)
    return KeyResponse(handled=handled, widget=widget.snapshot())


@router.post("/select", summary="City picked from the dropdown")
async def select_city(
    request: Request,
    body: CitySelection,
    widget: WeatherWidget = Depends(get_widget),
    format: ResponseFormat = FORMAT_QUERY,
):
    """Commit a city: update the text, fetch its weather and switch the background."""
    await widget.select_city(body.city)
    if format == "html":
        return TemplateRenderer.render_weather_tile(request, widget, headers=widget_changed_headers(widget))
    return widget.snapshot()


@router.post("/search", summary="Submit the search form")
async def search(
    request: Request,
    body: SearchRequest,
    widget: WeatherWidget = Depends(get_widget),
    format: ResponseFormat = FORMAT_QUERY,
):
    """Fetch weather for the submitted (or current) text; blank text is ignored."""
    await widget.search(body.city)
    if format == "html":
        return TemplateRenderer.render_weather_tile(request, widget, headers=widget_changed_headers(widget))
    return widget.snapshot()
