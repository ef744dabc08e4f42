"""Render sheet records into the page's books, talks and news regions."""
import logging
from typing import Callable, List, Optional
from portfolio.config import Config
from portfolio.markup import (
    escape_html,
    placeholder_cover_url,
    thumbnail_url,
    youtube_embed_url,
    youtube_video_id,
)
from portfolio.models import Book, NewsItem, PageSession, Record, Talk, pick
from portfolio.page import Page
from portfolio.parse import BOOK_CATEGORIES, book_category, parse_book, parse_news_item, parse_talk

logger = logging.getLogger(__name__)

INITIAL_ITEMS = 3
UNTITLED = "Untitled"

BUTTON_LABELS = {
    "talks": {
        "en": ("Show all talks", "Collapse talks"),
        "es": ("Mostrar todas las charlas", "Ocultar charlas"),
    },
    "news": {
        "en": ("Show all news", "Collapse news"),
        "es": ("Mostrar todas las noticias", "Ocultar noticias"),
    },
}

READ_MORE = {"en": "Read More &rarr;", "es": "Leer Más &rarr;"}


def _lang_key(lang: str) -> str:
    return "es" if lang == "es" else "en"


# --- Books -----------------------------------------------------------------

def book_cover_url(book: Book, lang: str, cloud_name: str) -> str:
    """
    Pick the gallery cover for a book.

    A localized cover image is padded to thumbnail size; without one a
    typographic cover is generated from the title.
    """
    img_src = book.img_src(lang)
    if img_src:
        return thumbnail_url(img_src)
    return placeholder_cover_url(book.title(lang) or UNTITLED, cloud_name)


def render_book(book: Book, lang: str, cloud_name: str) -> str:
    """Build the gallery entry for one book."""
    title = book.title(lang) or UNTITLED
    edition = book.edition(lang)
    purchase_link = book.purchase_link(lang) or "#"
    cover = book_cover_url(book, lang, cloud_name)
    logger.debug(f"Generated thumbnail URL: {cover}")

    return f"""
<a href="#" class="group text-center block book-item"
   data-type="{escape_html(book.category)}"
   data-img-src="{escape_html(book.img_src(lang))}"
   data-final-src="{escape_html(cover)}"
   data-title-en="{escape_html(book.title_en)}"
   data-title-es="{escape_html(book.title_es)}"
   data-desc-en="{escape_html(book.description_en)}"
   data-desc-es="{escape_html(book.description_es)}"
   data-link="{escape_html(purchase_link)}"
   data-available-langs="{escape_html(book.available_langs)}"
   data-year="{escape_html(book.year)}">
    <div class="relative inline-block overflow-hidden rounded-lg shadow-lg group-hover:shadow-xl transition-all duration-300">
        <img src="{escape_html(cover)}" alt="Cover for {escape_html(title)}"
             class="w-[200px] h-[300px] object-cover rounded-lg transform group-hover:scale-105 transition-transform duration-300">
    </div>
    <h3 class="text-lg font-bold text-gray-100 mt-4">{escape_html(title)}</h3>
    <p class="text-sm text-gray-500">{escape_html(edition)}</p>
</a>"""


def populate_books(
    page: Page,
    records: List[Record],
    lang: str = "en",
    on_rendered: Optional[Callable[[], None]] = None,
    cloud_name: str = Config.CLOUDINARY_CLOUD_NAME
) -> int:
    """
    Fill the four book category galleries.

    Args:
        page: Host page
        records: Books sheet records
        lang: Display language
        on_rendered: Called once the galleries are filled (e.g. to hook up
            the detail modal)
        cloud_name: Cloudinary account for generated covers

    Returns:
        Number of books rendered
    """
    if not records:
        return 0

    grids = {name: page.book_grid(name) for name in BOOK_CATEGORIES}
    for grid in grids.values():
        if grid is not None:
            grid.clear()

    rendered = 0
    for record in records:
        book = parse_book(record)
        category = book_category(book)
        grid = grids.get(category) if category else None

        if grid is None:
            logger.warning(f'Book category container not found for: "{book.category}"')
            continue

        page.append_html(grid, render_book(book, lang, cloud_name))
        rendered += 1

    if on_rendered is not None:
        on_rendered()

    return rendered


# --- Talks -----------------------------------------------------------------

def render_talk(talk: Talk, lang: str) -> str:
    """Build one talk entry, with an embedded player when it has a video."""
    title = escape_html(pick(lang, talk.title_en, talk.title_es))
    description = escape_html(pick(lang, talk.description_en, talk.description_es))
    link_text = escape_html(pick(lang, talk.link_text_en, talk.link_text_es))
    meta = talk.meta(lang)
    meta_html = f'<p class="text-sm text-gray-500 mt-2">{escape_html(meta)}</p>' if meta else ""

    text_html = f"""
<div>
    <h3 class="text-lg md:text-xl font-bold text-gray-100">{title}</h3>
    {meta_html}
    <p class="text-gray-400 mt-1">{description} |
        <a href="{escape_html(talk.link or '#')}" target="_blank" rel="noopener noreferrer" class="text-indigo-400 hover:underline">{link_text}</a>
    </p>
</div>"""

    video_id = youtube_video_id(talk.youtube_link)
    if not video_id:
        return f'<div class="border-b border-gray-700 pb-4">{text_html}</div>'

    embed_html = f"""
<div class="talks-video-wrapper">
    <iframe src="{escape_html(youtube_embed_url(video_id))}" title="YouTube video player for {title}"
            frameborder="0"
            allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"
            allowfullscreen></iframe>
</div>"""

    return f"""
<div class="border-b border-gray-700 pb-8 mb-8">
    <div class="flex flex-col md:flex-row md:gap-8 items-start">
        <div class="w-full md:w-1/2 mb-4 md:mb-0">{embed_html}</div>
        <div class="w-full md:w-1/2">{text_html}</div>
    </div>
</div>"""


def _talk_html(record: Record, lang: str) -> str:
    return render_talk(parse_talk(record), lang)


# --- News ------------------------------------------------------------------

def render_news_item(post: NewsItem, lang: str) -> str:
    """Build one news entry; both languages ride along for the detail view."""
    title = escape_html(pick(lang, post.title_en, post.title_es))
    date = escape_html(pick(lang, post.date_en, post.date_es))

    return f"""
<div class="border-b border-gray-700 pb-4">
    <h3 class="text-lg md:text-xl font-bold text-gray-100">{title}</h3>
    <p class="text-sm text-gray-500 mt-1">{date} |
        <a href="#" class="news-item-link text-indigo-400 hover:underline"
           data-title-en="{escape_html(post.title_en)}"
           data-title-es="{escape_html(post.title_es)}"
           data-date-en="{escape_html(post.date_en)}"
           data-date-es="{escape_html(post.date_es)}"
           data-img-src="{escape_html(post.img_src)}"
           data-link="{escape_html(post.link)}"
           data-description-en="{escape_html(post.description_en)}"
           data-description-es="{escape_html(post.description_es)}">{READ_MORE[_lang_key(lang)]}</a>
    </p>
</div>"""


def _news_html(record: Record, lang: str) -> str:
    return render_news_item(parse_news_item(record), lang)


# --- Paged sections ----------------------------------------------------------

ITEM_RENDERERS = {
    "talks": _talk_html,
    "news": _news_html,
}


def populate_section(page: Page, session: PageSession, section: str) -> int:
    """
    Render a talks/news list, collapsed to the first items unless expanded.

    The show-all and collapse buttons get localized labels and are enabled
    according to the current state. Their click handlers are attached the
    first time the section renders in a session, replacing handlers from
    any earlier session on the same page.

    Args:
        page: Host page
        session: Page session holding the section's records and state
        section: ``talks`` or ``news``

    Returns:
        Number of items rendered
    """
    container = page.section_list(section)
    state = session.section(section)
    if container is None or not state.records:
        return 0

    lang = session.language
    render_item = ITEM_RENDERERS[section]
    visible = state.records if state.expanded else state.records[:INITIAL_ITEMS]
    page.replace_contents(container, "".join(render_item(record, lang) for record in visible))

    show_all_label, collapse_label = BUTTON_LABELS[section][_lang_key(lang)]
    page.set_button(f"show-all-{section}", show_all_label, disabled=state.expanded)
    page.set_button(f"collapse-all-{section}", collapse_label, disabled=not state.expanded)

    if section not in session.listeners_attached:
        # Handlers left by an earlier session on this page render stale records
        page.off(f"show-all-{section}")
        page.off(f"collapse-all-{section}")
        page.on(f"show-all-{section}", lambda: show_all(page, session, section))
        page.on(f"collapse-all-{section}", lambda: collapse(page, session, section))
        session.listeners_attached.add(section)

    return len(visible)


def populate_talks(page: Page, session: PageSession) -> int:
    return populate_section(page, session, "talks")


def populate_news(page: Page, session: PageSession) -> int:
    return populate_section(page, session, "news")


def show_all(page: Page, session: PageSession, section: str) -> int:
    """Expand a section to every item and re-render it."""
    session.section(section).expanded = True
    return populate_section(page, session, section)


def collapse(page: Page, session: PageSession, section: str) -> int:
    """Collapse a section back to the first items and re-render it."""
    session.section(section).expanded = False
    return populate_section(page, session, section)
