"""End-to-end tests for populating a page from the three sheets."""
import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import httpx
import pytest

from portfolio.async_client import AsyncSheetClient
from portfolio.config import Config
from portfolio.models import CacheEntry
from portfolio.orchestrator import initialize_dynamic_content


@pytest.fixture
def config():
    config = Config()
    config.BOOKS_SHEET_URL = "https://sheets.test/books.csv"
    config.TALKS_SHEET_URL = "https://sheets.test/talks.csv"
    config.NEWS_SHEET_URL = "https://sheets.test/news.csv"
    config.CACHE_DURATION = 3600
    config.DEFAULT_LANGUAGE = "en"
    config.CLOUDINARY_CLOUD_NAME = "demo"
    return config


@pytest.fixture
def sheets(make_csv, make_book, talks, news):
    return {
        "/books.csv": make_csv([make_book("Fiction"), make_book("essays", title_en="Notes")]),
        "/talks.csv": make_csv(talks),
        "/news.csv": make_csv(news),
    }


class SheetServer:
    """MockTransport handler serving CSV bodies by path."""

    def __init__(self, sheets, failing=()):
        self.sheets = sheets
        self.failing = set(failing)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request.url.path)
        if request.url.path in self.failing:
            raise httpx.ConnectError("unreachable", request=request)
        return httpx.Response(200, text=self.sheets[request.url.path])


def _populate(page, store, config, server, now, **kwargs):
    client = AsyncSheetClient(transport=httpx.MockTransport(server))

    async def scenario():
        async with client:
            return await initialize_dynamic_content(
                page, store, config, async_client=client, clock=lambda: now, **kwargs
            )

    return asyncio.run(scenario())


def test_populates_all_sections(page, store, config, sheets, now):
    server = SheetServer(sheets)

    session = _populate(page, store, config, server, now)

    assert sorted(server.requests) == ["/books.csv", "/news.csv", "/talks.csv"]
    assert len(page.book_grid("fiction").select(".book-item")) == 1
    assert page.book_grid("essays").h3.get_text() == "Notes"
    assert len(page.section_list("talks").find_all("h3")) == 3
    assert len(page.section_list("news").find_all("h3")) == 3
    assert session.language == "en"
    assert len(session.section("talks").records) == 10


def test_results_are_cached_under_logical_keys(page, store, config, sheets, now):
    _populate(page, store, config, SheetServer(sheets), now)

    assert set(store.entries) == {"booksCache", "talksCache", "newsCache"}
    assert all(entry.fetched_at == now for entry in store.entries.values())
    assert len(store.entries["newsCache"].payload) == 10


def test_fresh_cache_avoids_network(page, store, config, make_talk, now):
    store.entries = {
        "booksCache": CacheEntry("booksCache", now - timedelta(minutes=10), []),
        "talksCache": CacheEntry("talksCache", now - timedelta(minutes=10), [make_talk(1)]),
        "newsCache": CacheEntry("newsCache", now - timedelta(minutes=10), []),
    }
    server = SheetServer({})

    _populate(page, store, config, server, now)

    assert server.requests == []
    assert page.section_list("talks").h3.get_text() == "Talk 1"


def test_one_failing_sheet_does_not_affect_others(page, store, config, sheets, now):
    server = SheetServer(sheets, failing={"/talks.csv"})

    _populate(page, store, config, server, now)

    assert "Loading talks..." in page.to_html()
    assert len(page.section_list("news").find_all("h3")) == 3
    assert len(page.book_grid("fiction").select(".book-item")) == 1
    assert store.entries["talksCache"].payload == []


def test_language_from_store(page, store, config, sheets, now):
    store.settings["language"] = "es"

    session = _populate(page, store, config, SheetServer(sheets), now)

    assert session.language == "es"
    assert page.book_grid("fiction").h3.get_text() == "La caza"
    assert page.by_id("show-all-news").get_text() == "Mostrar todas las noticias"


def test_books_hook_called(page, store, config, sheets, now):
    hook = MagicMock()

    _populate(page, store, config, SheetServer(sheets), now, on_books_rendered=hook)

    hook.assert_called_once_with()


def test_show_all_after_initialization(page, store, config, sheets, now):
    _populate(page, store, config, SheetServer(sheets), now)

    page.click("show-all-talks")

    assert len(page.section_list("talks").find_all("h3")) == 10
