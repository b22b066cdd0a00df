"""Logging configuration for cordrest.

Every setting is read from the `logging.*` configuration keys unless passed
explicitly:

    logging.level       root level name (default WARNING)
    logging.format      record format
    logging.file        optional path of an extra log file
    logging.http_level  level for the httpx/httpcore loggers (default WARNING)

Records go to stderr so command output on stdout stays parseable.
"""

import logging
import sys
from typing import Optional

from cordrest.infrastructure.config.settings import get_config

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers that log every request line at INFO
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


def parse_log_level(name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps a level name such as 'debug' to its logging constant."""
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def setup_logging(
    log_level: Optional[int] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> int:
    """Replaces the root logger's handlers according to configuration.

    Args:
        log_level: Overrides `logging.level`.
        log_format: Overrides `logging.format`.
        log_file: Overrides `logging.file`.

    Returns:
        The level the root logger was set to.
    """
    if log_level is None:
        log_level = parse_log_level(get_config('logging.level'))
    log_format = log_format or get_config('logging.format', DEFAULT_LOG_FORMAT)
    log_file = log_file or get_config('logging.file')

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(str(log_file), encoding='utf-8')
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Cannot write log file {log_file}: {e}")

    http_level = parse_log_level(get_config('logging.http_level'), default=logging.WARNING)
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(max(http_level, log_level))

    root_logger.debug(f"Logging configured at {logging.getLevelName(log_level)}")
    return log_level
