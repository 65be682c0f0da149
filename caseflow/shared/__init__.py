"""Shared: enums, telemetry, and small utilities used across layers."""
