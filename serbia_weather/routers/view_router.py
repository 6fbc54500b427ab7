"""Page/view routes for serving the widget page and its fragments."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from serbia_weather.dependencies import get_widget
from serbia_weather.state_managers import WeatherWidget
from serbia_weather.views.template_renderer import TemplateRenderer

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, widget: WeatherWidget = Depends(get_widget)):
    """Render the widget page."""
    return TemplateRenderer.render_index(request, widget)


@router.get("/tiles/weather", response_class=HTMLResponse)
async def weather_tile(request: Request, widget: WeatherWidget = Depends(get_widget)):
    """Render the weather panel fragment."""
    return TemplateRenderer.render_weather_tile(request, widget)


@router.get("/tiles/dropdown", response_class=HTMLResponse)
async def dropdown_tile(request: Request, widget: WeatherWidget = Depends(get_widget)):
    """Render the autocomplete dropdown fragment."""
    return TemplateRenderer.render_dropdown(request, widget)


@router.get("/tiles/background", response_class=HTMLResponse)
async def background_tile(request: Request, widget: WeatherWidget = Depends(get_widget)):
    """Render the background image fragment."""
    return TemplateRenderer.render_background(request, widget)
