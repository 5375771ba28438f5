"""
Logging configuration for Drive Note.

Usage:
    from drivenote.logging_config import setup_logging

    setup_logging(debug=settings.DEBUG)
"""

import logging
from typing import Optional

from drivenote.config import settings


def setup_logging(debug: Optional[bool] = None) -> None:
    """Configure logging based on debug flag (defaults to settings)."""
    if debug is None:
        debug = settings.DEBUG

    level = logging.DEBUG if debug else getattr(
        logging, settings.LOG_LEVEL.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    # Reduce noise from SQLAlchemy (unless debugging)
    if not debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
