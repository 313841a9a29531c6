"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

from .models import Link


class LinkStoreBase(ABC):
    """Bidirectional code <-> URL store.

    Implementations keep two indexes (code -> URL and URL -> code) and
    update both inside one transaction, so readers never see half a link.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Location of the backing database
        """
        self.db_config = db_config

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create both indexes if they do not exist yet. Idempotent."""
        pass

    @abstractmethod
    async def resolve(self, code: str) -> Optional[str]:
        """Get the URL stored for a code.

        Args:
            code: The short code to lookup

        Returns:
            The URL if found, None otherwise

        Raises:
            StoreError: If the lookup could not be performed
        """
        pass

    @abstractmethod
    async def put_or_reuse(self, canonical_url: str) -> Tuple[str, bool]:
        """Return the code for a URL, creating a link if the URL is new.

        Args:
            canonical_url: Already-normalized URL

        Returns:
            Tuple of (code, created) where created is False on reuse

        Raises:
            StoreError: If the transaction failed; nothing was written
        """
        pass

    @abstractmethod
    def snapshot(self):
        """Context manager yielding (count, links) from one read transaction.

        The count always equals the number of links iterated inside the block.
        """
        pass

    @abstractmethod
    def list_all(self) -> Iterator[Link]:
        """Lazily iterate every link from one consistent snapshot.

        Order is whatever the underlying index yields.
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of links."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close database connections."""
        pass
