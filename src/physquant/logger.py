"""Logging configuration for physquant.

A single library logger named ``physquant`` is configured at import time with
a console handler at WARNING level, so registrations and recoveries stay
silent unless a caller lowers the level. File logging at DEBUG level can be
switched on for a session::

    from physquant.logger import enable_file_logging, disable_file_logging, logger

    enable_file_logging("physquant_debug.log")
    logger.setLevel(logging.DEBUG)
    ...
    disable_file_logging()
"""

import logging
from typing import Optional

__all__ = (
    "logger",
    "enable_file_logging",
    "disable_file_logging",
)

formatter = logging.Formatter("%(levelname)s:%(name)s:%(message)s")
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)

logger: logging.Logger = logging.getLogger("physquant")
logger.addHandler(console_handler)
logger.setLevel(logging.WARNING)

file_handler: Optional[logging.FileHandler] = None


def enable_file_logging(filename: str = "physquant.log") -> None:
    """Log everything (DEBUG and above) to ``filename`` as well as the console.

    An already enabled file handler is replaced. The file is opened in append mode.
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
    logger.addHandler(file_handler)


def disable_file_logging() -> None:
    """Remove and close the file handler; safe to call when none is active."""
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
