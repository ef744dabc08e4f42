"""HTTP client for published spreadsheet CSV exports."""
import csv
import requests
from typing import List, Optional
import logging
from portfolio.models import Record
from portfolio.parse import Decoder, decode_csv

logger = logging.getLogger(__name__)


class SheetFetchError(Exception):
    """Raised when a sheet endpoint answers with a non-success status."""

    def __init__(self, url: str, status_code: int, reason: str):
        super().__init__(f"Network response was not ok: {reason}")
        self.url = url
        self.status_code = status_code
        self.reason = reason


class SheetClient:
    """Blocking client that fetches a sheet and decodes it into records."""

    def __init__(self, timeout: int = 10, decoder: Optional[Decoder] = None):
        """
        Initialize sheet client.

        Args:
            timeout: Request timeout in seconds
            decoder: Turns the response body into records (defaults to CSV)
        """
        self.timeout = timeout
        self.decoder = decoder or decode_csv

        # Create session for connection pooling
        self.session = requests.Session()

    def fetch(self, url: Optional[str]) -> List[Record]:
        """
        Fetch and decode one sheet.

        Never raises: network failures, error statuses and undecodable
        bodies are logged and reported as an empty list.

        Args:
            url: Published CSV URL

        Returns:
            Decoded records, or an empty list on any failure
        """
        if not url:
            logger.warning("No URL provided. Skipping fetch.")
            return []

        try:
            logger.info(f"Fetching sheet: {url}")
            response = self.session.get(url, timeout=self.timeout)

            if not response.ok:
                raise SheetFetchError(url, response.status_code, response.reason)

            return self.decoder(response.text)

        except (SheetFetchError, requests.exceptions.RequestException, csv.Error) as e:
            logger.error(f"Error fetching or parsing sheet data for {url}: {e}")
            return []

        except Exception as e:
            logger.error(f"Unexpected error for {url}: {e}")
            return []

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
