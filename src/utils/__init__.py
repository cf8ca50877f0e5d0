"""Utility functions for the alignment pipeline."""

from .logging import get_logger, set_level
from .config import load_config, DEFAULT_CONFIG

__all__ = ["get_logger", "set_level", "load_config", "DEFAULT_CONFIG"]
