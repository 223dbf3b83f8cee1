"""
Logger setup shared by all modules
"""

import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return a named logger with a single stream handler attached"""
    logger = logging.getLogger(name)
    level_name = level or os.getenv('MYSQL_UTIL_LOG_LEVEL', 'WARNING')
    logger.setLevel(getattr(logging, level_name.upper(), logging.WARNING))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
