"""Logging micro API for uischema-guard."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
