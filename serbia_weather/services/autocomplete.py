"""City autocomplete: substring filtering and dropdown keyboard navigation."""

MIN_QUERY_LENGTH = 2

KEY_DOWN = "ArrowDown"
KEY_UP = "ArrowUp"
KEY_ENTER = "Enter"
KEY_ESCAPE = "Escape"


def filter_cities(text: str, cities: list[str]) -> list[str]:
    """Cities containing text as a case-insensitive substring, in source order.

    Input shorter than two characters matches nothing.
    """
    if len(text) < MIN_QUERY_LENGTH:
        return []
    needle = text.lower()
    return [city for city in cities if needle in city.lower()]


class KeyAction:
    """Result of a key press on the dropdown.

    handled: the key was consumed and its default browser action should be suppressed
    commit: city to select, set only when Enter confirmed a highlighted entry
    """

    def __init__(self, handled: bool = False, commit: str | None = None):
        self.handled = handled
        self.commit = commit


class CitySearch:
    """Search box state: input text, matches, cursor and dropdown visibility.

    selected_index is always -1 or a valid index into filtered_cities.
    """

    def __init__(self, cities: list[str], text: str = ""):
        self.cities = cities
        self.text = text
        self.filtered_cities: list[str] = []
        self.selected_index = -1
        self.show_dropdown = False

    def set_text(self, text: str) -> None:
        self.text = text
        self.update_filter()

    def update_filter(self) -> None:
        """Recompute matches from the full city list and reset the cursor."""
        self.filtered_cities = filter_cities(self.text, self.cities)
        self.show_dropdown = bool(self.filtered_cities)
        self.selected_index = -1

    def move_selection(self, direction: int) -> bool:
        """Move the cursor; moving past either end leaves it where it is.

        Returns:
            True if the cursor moved
        """
        new_index = self.selected_index + direction
        if 0 <= new_index < len(self.filtered_cities):
            self.selected_index = new_index
            return True
        return False

    @property
    def selected_city(self) -> str | None:
        if self.selected_index < 0:
            return None
        return self.filtered_cities[self.selected_index]

    def handle_key(self, key: str) -> KeyAction:
        """Apply a key press while the dropdown is open.

        Enter does not commit anything itself; the caller selects the
        returned city so the fetch and image update happen in one place.
        """
        if not self.show_dropdown:
            return KeyAction()

        if key == KEY_DOWN:
            self.move_selection(1)
            return KeyAction(handled=True)
        if key == KEY_UP:
            self.move_selection(-1)
            return KeyAction(handled=True)
        if key == KEY_ENTER:
            city = self.selected_city
            if city is None:
                return KeyAction()
            return KeyAction(handled=True, commit=city)
        if key == KEY_ESCAPE:
            self.close()
            # Escape is not prevented in the browser
            return KeyAction()
        return KeyAction()

    def commit(self, city: str) -> None:
        self.text = city
        self.close()

    def close(self) -> None:
        self.show_dropdown = False
        self.selected_index = -1

    def on_focus(self) -> None:
        """Re-open the dropdown for text already in the box."""
        if len(self.text) >= MIN_QUERY_LENGTH:
            self.update_filter()
