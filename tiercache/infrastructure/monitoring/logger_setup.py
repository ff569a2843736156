"""Logging for the tiercache command line.

Library modules only call logging.getLogger(__name__). The CLI attaches its
handlers to the ``tiercache`` package logger, leaving the root logger of a
host process alone. Log lines go to stderr so command output on stdout can
be piped.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER_NAME = "tiercache"
DEFAULT_LEVEL_NAME = "WARNING"

BRIEF_FORMAT = '%(levelname)s: %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level_name: Optional[str], verbose: bool = False) -> int:
    """Maps a configured level name to a logging level.

    ``verbose`` always means DEBUG. Unknown or empty names fall back to WARNING.
    """
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(str(level_name or DEFAULT_LEVEL_NAME).strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(
    level_name: Optional[str] = DEFAULT_LEVEL_NAME,
    verbose: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configures the package logger for one CLI invocation.

    Handlers from a previous call are closed and replaced. Verbose runs use
    the timestamped format on stderr; otherwise only level and message are
    shown. A log file, when given, always gets the timestamped format.

    Args:
        level_name: Level name from configuration, e.g. "INFO".
        verbose: Forces DEBUG and the timestamped stderr format.
        log_file: Optional path that receives a copy of every record.

    Returns:
        The configured package logger.
    """
    level = resolve_level(level_name, verbose)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if verbose else BRIEF_FORMAT))
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            package_logger.error(f"Failed to set up file logging to {log_file}: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(VERBOSE_FORMAT))
            package_logger.addHandler(file_handler)

    package_logger.debug(f"Logging configured. Level={logging.getLevelName(level)}")
    return package_logger
