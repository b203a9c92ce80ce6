"""Logging helpers.

Modules log through ``logging.getLogger(__name__)``; the command line
entry point calls configure_logging() once to attach a handler.
"""

import logging

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger with a preset format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Log per-frame detail (DEBUG)
        quiet: Only log warnings and errors

    Returns:
        The ``vstab`` logger
    """
    logger = get_logger("vstab")
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.INFO)
    return logger
