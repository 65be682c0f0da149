"""Infrastructure: persistence, external channels, and engine services."""
