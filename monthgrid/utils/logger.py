# File: logger.py
"""
Logging setup for monthgrid.

Every logger lives under the ``monthgrid`` namespace and writes to stdout.
Setting MONTHGRID_LOG_TO_FILE adds a daily debug log in Config.LOGS_DIR.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from monthgrid.core.config_manager import Config

ROOT_NAME = "monthgrid"
CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'


def _file_handler() -> logging.Handler:
    Config.LOGS_DIR.mkdir(exist_ok=True)
    log_file = Config.LOGS_DIR / f"{ROOT_NAME}_{datetime.now():%Y%m%d}.log"
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logger(name: str = ROOT_NAME, level: Optional[int] = None) -> logging.Logger:
    """
    Return a configured logger under the monthgrid namespace.

    Args:
        name: Logger name; prefixed with "monthgrid." when it is not already
        level: Logging level (default: Config.LOG_LEVEL)

    Returns:
        Logger with its handlers attached once
    """
    if name != ROOT_NAME and not name.startswith(ROOT_NAME + "."):
        name = f"{ROOT_NAME}.{name}"
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if level is None:
        level = getattr(logging, Config.LOG_LEVEL, logging.INFO)
    logger.setLevel(level)
    logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console)

    if Config.LOG_TO_FILE:
        logger.addHandler(_file_handler())

    return logger


class LoggerMixin:
    """Gives a class a ``logger`` named after it."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = setup_logger(type(self).__name__)
        return self._logger
