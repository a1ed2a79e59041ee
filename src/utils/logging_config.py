import logging
import os
import sys
from typing import Optional, Union


def setup_logging(name: str = "pos_reconciler", level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Sets up the pipeline logger.

    Args:
        name: Name of the logger.
        level: Logging level. Falls back to the LOG_LEVEL environment
            variable, then INFO.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if already configured
    if logger.handlers:
        if level is not None:
            logger.setLevel(level)
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger

# Default logger for the project
logger = setup_logging()
