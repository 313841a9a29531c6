"""Business logic service for the shortlink service."""

import logging
from typing import Optional, Tuple, Union

from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .common.validators import normalize_url


class LinkService:
    """Service layer between the HTTP handlers and the link store."""

    def __init__(
        self,
        store: LinkStoreBase,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
        max_url_length: int = 2048,
    ):
        """Initialize link service.

        Args:
            store: Link store instance, shared by every request
            cache: Optional cache instance
            logger: Optional logger
            max_url_length: Longest URL accepted for shortening
        """
        self.store = store
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)
        self.max_url_length = max_url_length

    async def shorten(self, raw_url: Union[bytes, str]) -> Tuple[str, bool]:
        """Normalize a submitted URL and get its code.

        Validation happens before the store is touched.

        Args:
            raw_url: Request body as received

        Returns:
            Tuple of (code, created)

        Raises:
            ValidationError: If the URL is rejected
            StoreError: If the store transaction failed
        """
        canonical_url = normalize_url(raw_url, max_length=self.max_url_length)

        code, created = await self.store.put_or_reuse(canonical_url)

        if created:
            self.logger.info(f"Stored: {code} -> {canonical_url}")
        else:
            self.logger.info(f"Reused: {code} -> {canonical_url}")

        return code, created

    async def resolve(self, code: str) -> Optional[str]:
        """Get the URL for a code, consulting the cache first.

        Args:
            code: The short code to lookup

        Returns:
            URL or None if not found

        Raises:
            StoreError: If the store lookup failed
        """
        if self.cache:
            cache_key = self.cache.get_cache_key(code)
            cached_url = await self.cache.get(cache_key)
            if cached_url:
                self.logger.debug(f"Cache hit for {code}")
                return cached_url

        url = await self.store.resolve(code)

        if url is None:
            self.logger.info(f"Code not found: {code}")
            return None

        if self.cache:
            await self.cache.set(self.cache.get_cache_key(code), url)

        self.logger.info(f"Found code {code} -> {url}")
        return url

    async def close(self) -> None:
        """Close service connections."""
        self.store.close()
        if self.cache:
            await self.cache.close()
