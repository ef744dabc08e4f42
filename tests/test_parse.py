"""Tests for CSV decoding and record parsing."""
import pytest

from portfolio.models import pick
from portfolio.parse import (
    book_category,
    decode_csv,
    parse_book,
    parse_news_item,
    parse_talk,
)


def test_decode_csv_uses_header_row():
    """Test that the first row names the fields and order is kept."""
    text = "title_en,year\nThe Hunt,2020\nNorth,2018\n"

    records = decode_csv(text)

    assert records == [
        {"title_en": "The Hunt", "year": "2020"},
        {"title_en": "North", "year": "2018"},
    ]


def test_decode_csv_skips_blank_lines():
    """Test that empty lines between rows are ignored."""
    text = "title_en,year\r\n\r\nThe Hunt,2020\r\n\r\n\r\nNorth,2018\r\n"

    records = decode_csv(text)

    assert [r["title_en"] for r in records] == ["The Hunt", "North"]


def test_decode_csv_short_and_long_rows():
    """Test that missing cells become empty and extra cells are dropped."""
    text = "a,b,c\n1\n1,2,3,4\n"

    records = decode_csv(text)

    assert records[0] == {"a": "1", "b": "", "c": ""}
    assert records[1] == {"a": "1", "b": "2", "c": "3"}


def test_decode_csv_quoted_fields():
    """Test quoted cells with commas, quotes and newlines."""
    text = 'title_en,description_en\n"Hello, world","Line one\nLine ""two"""\n'

    records = decode_csv(text)

    assert records == [{"title_en": "Hello, world", "description_en": 'Line one\nLine "two"'}]


def test_decode_csv_strips_bom():
    """Test that a leading byte order mark does not leak into the header."""
    records = decode_csv("\ufefftitle_en\nThe Hunt\n")

    assert records == [{"title_en": "The Hunt"}]


@pytest.mark.parametrize("text", ["", "title_en,year\n"])
def test_decode_csv_no_rows(text):
    """Test that empty input and header-only input give no records."""
    assert decode_csv(text) == []


def test_parse_book_complete(make_book):
    """Test parsing a book with all fields present."""
    book = parse_book(make_book("Fiction", imgSrc_en="https://img/en.jpg"))

    assert book.category == "Fiction"
    assert book.title("en") == "The Hunt"
    assert book.title("es") == "La caza"
    assert book.purchase_link("es") == "https://example.com/comprar"
    assert book.img_src("en") == "https://img/en.jpg"
    assert book.img_src("es") == ""
    assert book.available_langs == "en,es"


def test_parse_book_missing_fields():
    """Test that absent headers become empty strings."""
    book = parse_book({"category": "essays"})

    assert book.title_en == ""
    assert book.edition("es") == ""
    assert book.year == ""


def test_parse_talk_meta():
    """Test the date/venue line with and without a separator."""
    talk = parse_talk({"date_en": "May 2024", "congress_en": "PyCon", "date_es": "mayo 2024"})

    assert talk.meta("en") == "May 2024 | PyCon"
    assert talk.meta("es") == "mayo 2024"
    assert parse_talk({}).meta("en") == ""
    assert parse_talk({"congress_en": "PyCon"}).meta("en") == "PyCon"


def test_parse_news_item():
    """Test news records keep both languages and the image source."""
    post = parse_news_item({"title_en": "Award", "title_es": "Premio", "imgSrc": "https://img/x.jpg"})

    assert post.title_en == "Award"
    assert post.title_es == "Premio"
    assert post.img_src == "https://img/x.jpg"
    assert post.link == ""


@pytest.mark.parametrize("category", ["Fiction", "fiction", "FICTION"])
def test_book_category_case_insensitive(category):
    """Test category matching ignores case."""
    assert book_category(parse_book({"category": category})) == "fiction"


@pytest.mark.parametrize("category", ["poetry", "", "fictions"])
def test_book_category_unknown(category):
    """Test that unknown categories are not matched."""
    assert book_category(parse_book({"category": category})) is None


def test_decode_csv_skips_leading_blank_lines():
    """Test the header is taken from the first non-blank line."""
    records = decode_csv("\n\r\ntitle_en,year\nA,2020\n")

    assert records == [{"title_en": "A", "year": "2020"}]


@pytest.mark.parametrize("lang,expected", [("es", "Hola"), ("en", "Hello"), ("fr", "Hello")])
def test_pick_language(lang, expected):
    """Test Spanish is chosen only for es, English otherwise."""
    assert pick(lang, "Hello", "Hola") == expected
