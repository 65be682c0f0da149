"""Shared utilities: datetime helpers, id generation, path resolution."""
