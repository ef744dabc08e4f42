"""Time-based cache in front of the sheet clients."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
from portfolio.models import CacheEntry, Record

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(hours=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SheetCache:
    """
    Serve sheet records from storage while they are fresh.

    ``store`` needs ``cache_get(key) -> Optional[CacheEntry]`` and
    ``cache_set(entry) -> bool``; ``Database`` provides both.

    A fetch that fails yields an empty list, and that empty list is stored
    like any other result, so the sheet stays empty until the window passes.
    """

    def __init__(
        self,
        store,
        client=None,
        async_client=None,
        window: timedelta = DEFAULT_WINDOW,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Args:
            store: Snapshot storage
            client: Blocking client with ``fetch(url)``
            async_client: Async client with ``fetch(url)``
            window: Freshness window
            clock: Returns the current aware datetime
        """
        self.store = store
        self.client = client
        self.async_client = async_client
        self.window = window
        self.clock = clock

    def lookup(self, key: str) -> Optional[List[Record]]:
        """Return the stored payload for ``key`` if it is still fresh."""
        try:
            entry = self.store.cache_get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None

        if entry is None:
            logger.info(f"Cache miss: {key}")
            return None

        if not entry.is_fresh(self.clock(), self.window):
            logger.info(f"Cache expired: {key} (fetched {entry.fetched_at.isoformat()})")
            return None

        logger.info(f"Loading {key} data from cache.")
        return entry.payload

    def remember(self, key: str, records: List[Record]) -> List[Record]:
        """Overwrite the snapshot for ``key`` with ``records``."""
        entry = CacheEntry(key=key, fetched_at=self.clock(), payload=records)
        try:
            stored = self.store.cache_set(entry)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return records

        if not stored:
            logger.warning(f"Could not store snapshot for {key}")
        return records

    def get_or_fetch(self, key: str, url: Optional[str]) -> List[Record]:
        """
        Get records from cache or fetch them with the blocking client.

        Args:
            key: Logical cache key
            url: Published CSV URL

        Returns:
            Cached or freshly fetched records
        """
        cached = self.lookup(key)
        if cached is not None:
            return cached

        logger.info(f"Fetching new data for {key}.")
        return self.remember(key, self.client.fetch(url))

    async def get_or_fetch_async(self, key: str, url: Optional[str]) -> List[Record]:
        """Same as ``get_or_fetch`` using the async client."""
        cached = self.lookup(key)
        if cached is not None:
            return cached

        logger.info(f"Fetching new data for {key}.")
        records = await self.async_client.fetch(url)
        return self.remember(key, records)
