"""Pydantic schemas for stored workflow definitions."""
