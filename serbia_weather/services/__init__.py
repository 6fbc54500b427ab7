"""Weather, autocomplete and background image services."""
