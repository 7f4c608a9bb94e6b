"""
Logging Configuration
=====================

Configures the standard library logger once at process start.
"""
import logging
from typing import Optional

from wayfarer.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Apply the configured log level and format to the root logger.

    Args:
        level: Optional level name overriding LOG_LEVEL from settings
    """
    global _configured
    if _configured:
        return

    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    _configured = True
