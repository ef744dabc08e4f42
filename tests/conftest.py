"""Shared fixtures: in-memory storage, a host page and CSV helpers."""
import csv
import io
from datetime import datetime, timezone

import pytest

from portfolio.page import Page

NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)

PAGE_HTML = """<html><body>
<section id="books">
  <div class="border-b">
    <button id="category-fiction">Fiction</button>
    <div class="accordion-panel"><div class="grid gap-8"><p>Loading...</p></div></div>
  </div>
  <div class="border-b">
    <button id="category-essays">Essays</button>
    <div class="accordion-panel"><div class="grid gap-8"></div></div>
  </div>
  <div class="border-b">
    <button id="category-anthologies">Anthologies</button>
    <div class="accordion-panel"><div class="grid gap-8"></div></div>
  </div>
  <div class="border-b">
    <button id="category-translations">Translations</button>
    <div class="accordion-panel"><div class="grid gap-8"></div></div>
  </div>
</section>
<section id="talks">
  <div class="space-y-8"><p>Loading talks...</p></div>
  <button id="show-all-talks" class="btn">Show all</button>
  <button id="collapse-all-talks" class="btn">Collapse</button>
</section>
<section id="news">
  <div class="space-y-8"></div>
  <button id="show-all-news" class="btn">Show all</button>
  <button id="collapse-all-news" class="btn">Collapse</button>
</section>
</body></html>
"""


class MemoryStore:
    """Dict-backed stand-in for Database."""

    def __init__(self, entries=None, settings=None):
        self.entries = dict(entries or {})
        self.settings = dict(settings or {})
        self.reads = 0
        self.writes = []

    def cache_get(self, key):
        self.reads += 1
        return self.entries.get(key)

    def cache_set(self, entry):
        self.writes.append(entry)
        self.entries[entry.key] = entry
        return True

    def get_setting(self, name, default=None):
        return self.settings.get(name, default)

    def set_setting(self, name, value):
        self.settings[name] = value
        return True


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def page():
    return Page(PAGE_HTML)


@pytest.fixture
def make_csv():
    """Return a function that serializes records to CSV text."""
    def _make_csv(records, fieldnames=None):
        fieldnames = fieldnames or list(records[0].keys())
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(records)
        return buffer.getvalue()
    return _make_csv


def talk_record(n, **fields):
    record = {
        "title_en": f"Talk {n}",
        "title_es": f"Charla {n}",
        "description_en": f"About talk {n}",
        "description_es": f"Sobre la charla {n}",
        "linkText_en": "Program",
        "linkText_es": "Programa",
        "date_en": "",
        "date_es": "",
        "congress_en": "",
        "congress_es": "",
        "link": f"https://example.com/talks/{n}",
        "youtubeLink": "",
    }
    record.update(fields)
    return record


def news_record(n, **fields):
    record = {
        "date_en": f"May {n}, 2025",
        "date_es": f"{n} de mayo de 2025",
        "title_en": f"News {n}",
        "title_es": f"Noticia {n}",
        "description_en": f"Story {n}",
        "description_es": f"Historia {n}",
        "imgSrc": "",
        "link": f"https://example.com/news/{n}",
    }
    record.update(fields)
    return record


def book_record(category, **fields):
    record = {
        "category": category,
        "title_en": "The Hunt",
        "title_es": "La caza",
        "edition_en": "Paperback, 2020",
        "edition_es": "Tapa blanda, 2020",
        "purchaseLink_en": "https://example.com/buy",
        "purchaseLink_es": "https://example.com/comprar",
        "imgSrc_en": "",
        "imgSrc_es": "",
        "description_en": "A novel.",
        "description_es": "Una novela.",
        "availableLangs": "en,es",
        "year": "2020",
    }
    record.update(fields)
    return record


@pytest.fixture
def talks():
    return [talk_record(n) for n in range(1, 11)]


@pytest.fixture
def news():
    return [news_record(n) for n in range(1, 11)]


@pytest.fixture
def make_book():
    return book_record


@pytest.fixture
def make_talk():
    return talk_record


@pytest.fixture
def make_news():
    return news_record


@pytest.fixture
def now():
    return NOW
