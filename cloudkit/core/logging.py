"""Logging utilities for cloudkit modules."""

import logging
from typing import Tuple

LOGGER_NAMES: Tuple[str, ...] = (
    'cloudkit',
    'cloudkit.api',
    'cloudkit.upload',
    'cloudkit.upload.coordinator',
    'cloudkit.upload.chunk',
    'cloudkit.upload.session',
    'cloudkit.upload.hash',
    'cloudkit.upload.file',
    'cloudkit.provider.aliyundrive',
)


def get_logger(name: str) -> logging.Logger:
    """Get a cloudkit logger that defers to the application's setup.

    Records propagate to the root logger, so ``logging.basicConfig()``
    is enough to see them. While the root logger has no handlers the
    logger is held at WARNING, keeping debug request lines quiet in
    applications that never configured logging.

    Args:
        name: Logger name (``cloudkit.<area>``)

    Returns:
        The logger
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)

    return logger


def setup_logging(level=logging.INFO):
    """
    Set the level of every cloudkit logger.

    Args:
        level: Logging level (default: logging.INFO)
    """
    for logger_name in LOGGER_NAMES:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True
