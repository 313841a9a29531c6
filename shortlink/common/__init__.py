"""Common utilities for the shortlink service."""

from .validators import normalize_url, ALLOWED_SCHEMES
from .logging_config import setup_logging, get_logger

__all__ = [
    "normalize_url",
    "ALLOWED_SCHEMES",
    "setup_logging",
    "get_logger",
]
