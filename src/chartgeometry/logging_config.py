"""
Logging Configuration
Attaches handlers to the 'chartgeometry' logger for applications embedding the
engine. Importing the package never configures logging; every module only
creates its own child logger.
"""
import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "chartgeometry"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: TextIO = sys.stdout
) -> logging.Logger:
    """
    Route layout diagnostics (degenerate domains, malformed colors, Sankey
    cycle warnings, per-call DEBUG summaries) to `stream` and optionally a file.

    Calling this again replaces the handlers of an earlier call.

    Args:
        level: Threshold for the package logger and its handlers.
        log_file: Optional path; the file is truncated on setup.
        stream: Console stream, stdout by default.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized at level {logging.getLevelName(level)}.")
    return logger
