"""Shared telemetry: logging setup."""

from caseflow.shared.telemetry.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
