"""Telemetry: logging setup."""

from monocloud.shared.telemetry.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
