"""Core business logic for the shortlink service."""

from .shortcode import ShortCodeGenerator
from .service import LinkService
from .errors import StoreError, ValidationError

__all__ = ["ShortCodeGenerator", "LinkService", "StoreError", "ValidationError"]
