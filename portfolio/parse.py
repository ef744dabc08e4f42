"""Decode sheet CSV exports and normalize records."""
import csv
import io
from typing import Callable, List, Optional
from portfolio.models import Book, NewsItem, Record, Talk

# Callable used by the fetch clients to turn a response body into records
Decoder = Callable[[str], List[Record]]

BOOK_CATEGORIES = ("fiction", "essays", "anthologies", "translations")


def decode_csv(text: str) -> List[Record]:
    """
    Decode CSV text into records.

    The first row holds the field names. Blank lines are skipped, cells
    missing at the end of a short row become empty strings and cells past
    the last header are dropped.

    Args:
        text: Raw CSV body

    Returns:
        Records in source row order
    """
    if not text:
        return []

    # Sheets exports sometimes start with a byte order mark; the header is
    # the first non-blank line
    text = text.lstrip("\ufeff").lstrip("\r\n")

    reader = csv.DictReader(io.StringIO(text, newline=""), restval="")
    records = []

    for row in reader:
        row.pop(None, None)
        records.append({key: value or "" for key, value in row.items()})

    return records


def _field(record: Record, name: str) -> str:
    value = record.get(name)
    return value if value else ""


def parse_book(record: Record) -> Book:
    """
    Build a Book from a books sheet record.

    Args:
        record: Row keyed by header name

    Returns:
        Book with empty strings for absent fields
    """
    return Book(
        category=_field(record, "category"),
        title_en=_field(record, "title_en"),
        title_es=_field(record, "title_es"),
        edition_en=_field(record, "edition_en"),
        edition_es=_field(record, "edition_es"),
        purchase_link_en=_field(record, "purchaseLink_en"),
        purchase_link_es=_field(record, "purchaseLink_es"),
        img_src_en=_field(record, "imgSrc_en"),
        img_src_es=_field(record, "imgSrc_es"),
        description_en=_field(record, "description_en"),
        description_es=_field(record, "description_es"),
        available_langs=_field(record, "availableLangs"),
        year=_field(record, "year"),
    )


def parse_talk(record: Record) -> Talk:
    """Build a Talk from a talks sheet record."""
    return Talk(
        title_en=_field(record, "title_en"),
        title_es=_field(record, "title_es"),
        description_en=_field(record, "description_en"),
        description_es=_field(record, "description_es"),
        link_text_en=_field(record, "linkText_en"),
        link_text_es=_field(record, "linkText_es"),
        date_en=_field(record, "date_en"),
        date_es=_field(record, "date_es"),
        congress_en=_field(record, "congress_en"),
        congress_es=_field(record, "congress_es"),
        link=_field(record, "link"),
        youtube_link=_field(record, "youtubeLink"),
    )


def parse_news_item(record: Record) -> NewsItem:
    return NewsItem(
        date_en=_field(record, "date_en"),
        date_es=_field(record, "date_es"),
        title_en=_field(record, "title_en"),
        title_es=_field(record, "title_es"),
        description_en=_field(record, "description_en"),
        description_es=_field(record, "description_es"),
        img_src=_field(record, "imgSrc"),
        link=_field(record, "link"),
    )


def book_category(book: Book) -> Optional[str]:
    """
    Match a book's category against the known gallery categories.

    Args:
        book: Parsed book

    Returns:
        Lower-cased category name, or None if it is not a known one
    """
    category = book.category.strip().lower()
    return category if category in BOOK_CATEGORIES else None
