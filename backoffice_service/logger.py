"""Shared service logger."""

import logging
import sys

from config import LOG_LEVEL

logger = logging.getLogger("backoffice")

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(_handler)
    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
