import logging
from datetime import datetime, timezone
from typing import Optional, Union

from .settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Sends the `stationlists` log records to stderr.

    Args:
        level: Level name or number, STATIONLISTS_LOG_LEVEL by default

    Returns:
        The package logger, every module logger propagates to it
    """
    logger = logging.getLogger("stationlists")
    logger.setLevel(level or LOG_LEVEL)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def generated_at() -> str:
    """UTC build time stamped into the saved tables, to the second."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def current_reporting_year() -> int:
    """Calendar year a station must still report in to count as active."""
    return datetime.now().year
