"""Populate a page with all sheet content in one pass."""
import asyncio
import logging
from datetime import timedelta
from typing import Callable, Optional
from portfolio.async_client import AsyncSheetClient
from portfolio.cache import SheetCache, utc_now
from portfolio.config import Config
from portfolio.models import SECTIONS, PageSession
from portfolio.page import Page
from portfolio.renderers import populate_books, populate_news, populate_talks

logger = logging.getLogger(__name__)

LANGUAGE_SETTING = "language"


async def initialize_dynamic_content(
    page: Page,
    store,
    config: Config,
    async_client: Optional[AsyncSheetClient] = None,
    on_books_rendered: Optional[Callable[[], None]] = None,
    clock=None
) -> PageSession:
    """
    Fetch the three sheets concurrently and render them into ``page``.

    Each sheet goes through the cache independently; a sheet that fails
    to load comes back empty and leaves its region untouched.

    Args:
        page: Host page
        store: Snapshot and settings storage (see ``Database``)
        config: Application configuration
        async_client: Client to fetch with (one is created if omitted)
        on_books_rendered: Called after the book galleries are filled
        clock: Optional clock for the cache

    Returns:
        The page session, for later show-all/collapse clicks
    """
    logger.info("Initializing dynamic content...")

    owns_client = async_client is None
    if owns_client:
        async_client = AsyncSheetClient(timeout=config.DEFAULT_TIMEOUT)

    cache = SheetCache(
        store,
        async_client=async_client,
        window=timedelta(seconds=config.CACHE_DURATION),
        clock=clock or utc_now
    )

    urls = config.sheet_urls()
    try:
        results = await asyncio.gather(*[
            cache.get_or_fetch_async(config.CACHE_KEYS[section], urls[section])
            for section in SECTIONS
        ])
    finally:
        if owns_client:
            await async_client.close()

    session = PageSession(language=store.get_setting(LANGUAGE_SETTING, config.DEFAULT_LANGUAGE))
    for section, records in zip(SECTIONS, results):
        session.load(section, records)
        logger.info(f"{section.capitalize()} data: {len(records)} records")

    populate_books(
        page,
        session.section("books").records,
        session.language,
        on_rendered=on_books_rendered,
        cloud_name=config.CLOUDINARY_CLOUD_NAME
    )
    populate_talks(page, session)
    populate_news(page, session)

    logger.info("Dynamic content initialization complete.")
    return session
