"""Shared utilities."""

from .logger import setup_logger, set_log_level

__all__ = ["setup_logger", "set_log_level"]
