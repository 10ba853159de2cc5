# src/geostar/logging_config.py

"""
Logging setup for applications built on geostar.

Library modules only create module loggers; handlers are attached here, on demand.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

__all__ = [
    "LOG_FORMAT",
    "setup_logging"
]

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Configures the 'geostar' logger namespace.

    Existing handlers are cleared first so repeated calls do not duplicate output.

    Args:
        level (Union[int, str]): Logging threshold, as a number or a level name ('DEBUG', 'INFO', ...).
        log_file (Optional[Union[str, Path]]): Optional path of a file that receives a copy of the logs.

    Returns:
        logging.Logger: The configured package logger.
    """
    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")
        level = numeric_level

    logger = logging.getLogger("geostar")
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized at level {logging.getLevelName(level)}")
    return logger
