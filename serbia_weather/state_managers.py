"""State managers for application-wide mutable state.

The weather widget keeps all of its view state here. Everything runs on the
event loop thread; overlapping fetches and image checks are resolved by
generation numbers instead of locks (the newest trigger wins).
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx

from serbia_weather.config import Settings
from serbia_weather.exceptions import CityNotFoundException, WeatherException
from serbia_weather.logging_config import get_logger, log_with_context
from serbia_weather.models.base_models import WidgetSnapshot
from serbia_weather.models.weather import WeatherResult
from serbia_weather.services.autocomplete import CitySearch
from serbia_weather.services.image_service import DEFAULT_IMAGE_KEY, BackgroundImage, probe_image, resolve_image_url
from serbia_weather.services.weather_service import fetch_current_weather

CITY_NOT_FOUND_MESSAGE = "City not found."
FETCH_FAILED_MESSAGE = "Failed to load weather data. Please try again later."

logger = get_logger(__name__)


class StateManager(ABC):
    """Base class for all state managers.

    Subclasses are created at app startup and must implement the lifecycle
    methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


class WeatherWidget(StateManager):
    """The weather widget: search box, weather panel, background and refresh timer.

    initialize() mounts the widget (first fetch, background image, refresh
    timer) and cleanup() unmounts it. Deferred work (image checks, closing
    the dropdown after blur) runs in separate tasks, so callers must not
    assume it has finished when a method returns.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        """Initialize the widget for the configured default city.

        Args:
            client: Shared HTTP client for weather and image requests
            settings: Settings providing the city list, image map and timings
        """
        self._client = client
        self._settings = settings
        self.search_box = CitySearch(settings.cities, text=settings.default_city)
        self.weather: WeatherResult | None = None
        self.error_message = ""
        self.is_loading = True
        self.last_updated: datetime | None = None
        self.background = BackgroundImage()
        self._refresh_task: asyncio.Task | None = None
        self._pending_tasks: set[asyncio.Task] = set()
        self._fetch_generation = 0
        self._image_generation = 0

    @property
    def city(self) -> str:
        return self.search_box.text

    @property
    def is_mounted(self) -> bool:
        return self._refresh_task is not None

    async def initialize(self) -> None:
        """Mount: show the default city's background and weather, then start auto-refresh."""
        if self.is_mounted:
            log_with_context(
                logger,
                "warning",
                "Weather widget already mounted",
                event_type="widget_mount_skipped",
            )
            return

        log_with_context(logger, "info", "Mounting weather widget", city=self.city, event_type="widget_mount")
        self.set_background_image(self.city)
        self._refresh_task = asyncio.create_task(self._auto_refresh(), name="weather-auto-refresh")
        await self.load_weather()

    async def cleanup(self) -> None:
        """Unmount: cancel the refresh timer and any deferred work still pending."""
        refresh_task, self._refresh_task = self._refresh_task, None
        tasks = list(self._pending_tasks)
        if refresh_task is not None:
            tasks.append(refresh_task)

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._pending_tasks.clear()

        log_with_context(
            logger,
            "info",
            "Weather widget unmounted",
            cancelled_tasks=len(tasks),
            event_type="widget_unmount",
        )

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)
        return task

    # Search box events

    def set_text(self, text: str) -> None:
        """Input text changed."""
        self.search_box.set_text(text)

    def on_focus(self) -> None:
        self.search_box.on_focus()

    def on_blur(self) -> asyncio.Task:
        """Close the dropdown after a short grace delay so a click on an entry still lands."""
        return self._spawn(self._close_after_grace(), name="dropdown-blur")

    async def _close_after_grace(self) -> None:
        await asyncio.sleep(self._settings.blur_grace_seconds)
        self.search_box.close()

    async def handle_key(self, key: str) -> bool:
        """Handle a key press in the search box.

        Returns:
            True if the key was consumed by the dropdown
        """
        action = self.search_box.handle_key(key)
        if action.commit is not None:
            await self.select_city(action.commit)
        return action.handled

    async def select_city(self, city: str) -> None:
        """Commit a city from the dropdown: update text, background and weather."""
        log_with_context(logger, "info", "City selected", city=city, event_type="city_selected")
        self.search_box.commit(city)
        self.set_background_image(city)
        await self.load_weather()

    async def search(self, city: str | None = None) -> bool:
        """Submit the search form.

        Args:
            city: New input text, or None to search for the current text

        Returns:
            False if the text is blank and nothing was fetched
        """
        if city is not None:
            self.search_box.set_text(city)
        if not self.city.strip():
            return False
        self.set_background_image(self.city)
        await self.load_weather()
        return True

    # Weather

    async def load_weather(self) -> None:
        """Fetch weather for the current city and apply the outcome to the view state.

        Never raises for fetch failures; they end up in error_message. A
        completion that was overtaken by a newer fetch is discarded.
        """
        self._fetch_generation += 1
        generation = self._fetch_generation
        city = self.city.strip()

        self.is_loading = True
        self.error_message = ""
        self.search_box.close()

        try:
            result = await fetch_current_weather(self._client, city, self._settings)
        except CityNotFoundException:
            if self._is_stale_fetch(generation, city):
                return
            self._apply_error(CITY_NOT_FOUND_MESSAGE)
        except WeatherException as e:
            if self._is_stale_fetch(generation, city):
                return
            log_with_context(
                logger,
                "error",
                "Weather fetch failed",
                city=city,
                error=e.message,
                error_code=e.code.value,
                event_type="widget_fetch_failed",
            )
            self._apply_error(FETCH_FAILED_MESSAGE)
        else:
            if self._is_stale_fetch(generation, city):
                return
            self.weather = result
            self.error_message = ""
            self.is_loading = False
            self.last_updated = datetime.now()
            log_with_context(
                logger,
                "info",
                "Weather updated",
                city=result.city,
                temperature=result.temperature,
                condition=result.condition,
                event_type="widget_weather_updated",
            )

    def _is_stale_fetch(self, generation: int, city: str) -> bool:
        if generation == self._fetch_generation:
            return False
        log_with_context(
            logger,
            "debug",
            "Discarding superseded weather response",
            city=city,
            generation=generation,
            latest_generation=self._fetch_generation,
            event_type="widget_fetch_superseded",
        )
        return True

    def _apply_error(self, message: str) -> None:
        self.weather = None
        self.is_loading = False
        self.error_message = message

    async def _auto_refresh(self) -> None:
        interval = self._settings.refresh_interval_seconds
        while True:
            await asyncio.sleep(interval)
            if not self.city.strip():
                continue
            log_with_context(
                logger,
                "info",
                "Auto-refreshing weather data",
                city=self.city,
                event_type="widget_auto_refresh",
            )
            try:
                await self.load_weather()
            except Exception as e:
                # Keep the timer alive; the next tick retries
                log_with_context(
                    logger,
                    "error",
                    "Auto-refresh failed unexpectedly",
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="widget_auto_refresh_error",
                )

    # Background image

    def set_background_image(self, city: str) -> asyncio.Task:
        """Switch the background to the city's image.

        The loading flag is raised immediately; the image itself is resolved
        and checked in a separate task, falling back to the default image.
        """
        self.background.is_loading = True
        self._image_generation += 1
        return self._spawn(self._apply_background(city, self._image_generation), name="background-image")

    async def _apply_background(self, city: str, generation: int) -> None:
        if generation != self._image_generation:
            return
        images = self._settings.city_images
        url = resolve_image_url(city, images)
        self.background.url = url

        loadable = await probe_image(self._client, url)
        if generation != self._image_generation:
            return

        default_url = images[DEFAULT_IMAGE_KEY]
        if not loadable and url != default_url:
            log_with_context(
                logger,
                "warning",
                "Falling back to default background image",
                city=city,
                url=url,
                event_type="image_fallback",
            )
            self.background.url = default_url
            loadable = await probe_image(self._client, default_url)
            if generation != self._image_generation:
                return

        if not loadable:
            log_with_context(
                logger,
                "error",
                "Default background image not loadable",
                url=default_url,
                event_type="image_default_unavailable",
            )
        self.background.is_loading = False

    def snapshot(self) -> WidgetSnapshot:
        """Current view state as a serializable model."""
        return WidgetSnapshot(
            city=self.city,
            filtered_cities=list(self.search_box.filtered_cities),
            selected_index=self.search_box.selected_index,
            show_dropdown=self.search_box.show_dropdown,
            weather=self.weather,
            icon=self.weather.icon if self.weather else None,
            error_message=self.error_message,
            is_loading=self.is_loading,
            last_updated=self.last_updated,
            background_image=self.background.url,
            is_image_loading=self.background.is_loading,
        )
