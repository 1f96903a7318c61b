"""Logging utilities for the pull-request tools."""

import logging
import sys

import colorlog

PACKAGE_LOGGER = "azdo_tools"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def setup_logger(name: str, log_level: str = "INFO") -> logging.Logger:
    """
    Set up a colorized logger for console output.

    Output goes to stderr so that diff text printed by the CLI on stdout
    stays clean.

    Args:
        name: Logger name (usually __name__)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s: %(message)s",
            reset=True,
            log_colors=LOG_COLORS,
            style="%",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def set_log_level(log_level: str) -> None:
    """
    Apply a log level to every logger already created under the package.

    Args:
        log_level: Logging level name from configuration
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger):
            continue
        if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
            logger.setLevel(level)
            for handler in logger.handlers:
                handler.setLevel(level)
