"""
Logging utilities for NewsLens.
"""

import sys
from pathlib import Path
from typing import List, Optional, Union
from loguru import logger
from config.settings import LOGGING_CONFIG

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)


def setup_logging(level: Optional[str] = None,
                  log_file: Optional[Union[str, Path]] = None,
                  console: bool = True) -> List[int]:
    """
    Route loguru output to stderr and a rotating log file.

    Reports and chart data are printed on stdout, so the console sink
    writes to stderr.

    Args:
        level: Minimum level; defaults to LOG_LEVEL from settings
        log_file: Log file path; defaults to the configured one
        console: Whether to add the stderr sink

    Returns:
        Handler ids of the added sinks
    """
    level = (level or LOGGING_CONFIG['level']).upper()
    log_file = Path(log_file or LOGGING_CONFIG['log_file'])

    logger.remove()
    handler_ids = []

    if console:
        handler_ids.append(logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True))

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler_ids.append(logger.add(
        log_file,
        level=level,
        format=LOGGING_CONFIG['format'],
        rotation=LOGGING_CONFIG['rotation'],
        retention=LOGGING_CONFIG['retention'],
        compression='zip',
        encoding='utf-8',
    ))

    logger.debug(f"Logging to {log_file} at {level}")
    return handler_ids
