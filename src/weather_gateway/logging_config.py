"""Centralized logging configuration."""

import logging

from weather_gateway.config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL):
    """
    Configure a consistent logging format for the gateway and its HTTP stack.

    Args:
        level: Log level name applied to the root logger and the HTTP loggers
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO; keep it, but drop the low-level transport chatter
    logging.getLogger("httpx").setLevel(level)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
