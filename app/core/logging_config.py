"""Logging configuration helpers."""

import logging
from typing import Union


def configure_logging(level: Union[int, str] = "INFO") -> logging.Logger:
    """Configure basic logging for the service and return its root logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("app")
