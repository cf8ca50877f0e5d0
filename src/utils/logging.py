"""Logging helpers for the alignment pipeline.

Every module obtains its logger through :func:`get_logger` so that
messages share one format regardless of which stage emits them.  The
level defaults to INFO and can be changed with :func:`set_level`, which
the command-line entry point uses for its ``--verbose`` flag.
"""

import logging

_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger with a preset format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def set_level(level: int) -> None:
    """Set the level of every logger created through :func:`get_logger`."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.startswith("src."):
            logger.setLevel(level)
