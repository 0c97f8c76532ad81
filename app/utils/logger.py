import logging
import sys
from typing import Optional

from app.core.config import settings


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a stdout logger for a trip planner module.

    The level comes from settings.LOG_LEVEL; unknown level names fall back
    to INFO. Handlers are attached once per logger name.

    Args:
        name: Logger name (typically __name__ from calling module)
    """
    logger = logging.getLogger(name or "trip_planner")

    if not logger.handlers:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

        logger.addHandler(handler)
        logger.setLevel(level)

    return logger
