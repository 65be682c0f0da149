"""DTOs exchanged between repositories, channels and engine services."""
