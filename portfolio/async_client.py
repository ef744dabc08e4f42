"""Async HTTP client for parallel sheet fetches."""
import asyncio
import csv
import httpx
from typing import List, Optional
import logging
from portfolio.client import SheetFetchError
from portfolio.models import Record
from portfolio.parse import Decoder, decode_csv

logger = logging.getLogger(__name__)


class AsyncSheetClient:
    """Async client for fetching several sheets at once."""

    def __init__(
        self,
        timeout: int = 10,
        decoder: Optional[Decoder] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            timeout: Request timeout
            decoder: Turns the response body into records (defaults to CSV)
            transport: Optional httpx transport, mainly for tests
        """
        self.timeout = timeout
        self.decoder = decoder or decode_csv

        # Published sheet URLs redirect to googleusercontent.com
        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport
        )

    async def fetch(self, url: Optional[str]) -> List[Record]:
        """
        Fetch and decode one sheet asynchronously.

        Args:
            url: Published CSV URL

        Returns:
            Decoded records, or an empty list on any failure
        """
        if not url:
            logger.warning("No URL provided. Skipping fetch.")
            return []

        try:
            logger.info(f"Async fetch: {url}")
            response = await self.client.get(url)

            if not response.is_success:
                raise SheetFetchError(url, response.status_code, response.reason_phrase)

            return self.decoder(response.text)

        except (SheetFetchError, httpx.HTTPError, csv.Error) as e:
            logger.error(f"Error fetching or parsing sheet data for {url}: {e}")
            return []

        except Exception as e:
            logger.error(f"Unexpected error for {url}: {e}")
            return []

    async def fetch_many(self, urls: List[Optional[str]]) -> List[List[Record]]:
        """
        Fetch several sheets in parallel.

        Args:
            urls: Published CSV URLs

        Returns:
            One record list per URL, in the same order
        """
        tasks = [self.fetch(url) for url in urls]
        return list(await asyncio.gather(*tasks))

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
