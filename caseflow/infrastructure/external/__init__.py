"""External channel clients (email, SMS, chat) over httpx."""
