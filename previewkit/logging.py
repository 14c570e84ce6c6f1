"""
Logging helpers for previewkit.
"""

import logging
from typing import Optional, Union

_LOGGER_NAME = "previewkit"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the previewkit hierarchy."""
    if not name or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Install a single console handler on the previewkit logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Streamlit reruns the script on every interaction; keep one handler.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
