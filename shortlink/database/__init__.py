"""Storage layer for the shortlink service."""

from .base import LinkStoreBase
from .sqlite import SQLiteLinkStore
from .cache import RedisCache
from .models import Link

__all__ = ["LinkStoreBase", "SQLiteLinkStore", "RedisCache", "Link"]
