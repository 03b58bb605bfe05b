"""HTTP API for the Pintwatch application."""
