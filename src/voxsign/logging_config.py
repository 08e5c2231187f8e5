"""Logging setup for the command-line entry point.

The library modules only create loggers; handlers are installed here.
"""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(log_level: str = 'WARNING', log_file: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a log file written in addition to stderr
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
