"""Domain layer: workflow entities and exceptions (no infrastructure imports)."""
