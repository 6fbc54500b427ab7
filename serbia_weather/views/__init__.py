"""View rendering for the HTML page and its HTMX fragments."""
