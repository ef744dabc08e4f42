"""Data models for sheet content and page state."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Set

# One CSV row keyed by header name
Record = Dict[str, str]

SECTIONS = ("books", "talks", "news")


def pick(lang: str, en: str, es: str) -> str:
    """Return the Spanish value for ``es``, the English one otherwise."""
    return es if lang == "es" else en


@dataclass
class Book:
    """A book from the books sheet."""
    category: str
    title_en: str
    title_es: str
    edition_en: str
    edition_es: str
    purchase_link_en: str
    purchase_link_es: str
    img_src_en: str
    img_src_es: str
    description_en: str
    description_es: str
    available_langs: str
    year: str

    def title(self, lang: str) -> str:
        return pick(lang, self.title_en, self.title_es)

    def edition(self, lang: str) -> str:
        return pick(lang, self.edition_en, self.edition_es)

    def purchase_link(self, lang: str) -> str:
        return pick(lang, self.purchase_link_en, self.purchase_link_es)

    def img_src(self, lang: str) -> str:
        return pick(lang, self.img_src_en, self.img_src_es)


@dataclass
class Talk:
    """A talk from the talks sheet."""
    title_en: str
    title_es: str
    description_en: str
    description_es: str
    link_text_en: str
    link_text_es: str
    date_en: str
    date_es: str
    congress_en: str
    congress_es: str
    link: str
    youtube_link: str

    def meta(self, lang: str) -> str:
        """Date and venue joined by `` | `` when both are present."""
        parts = [
            pick(lang, self.date_en, self.date_es),
            pick(lang, self.congress_en, self.congress_es),
        ]
        return " | ".join(part for part in parts if part)


@dataclass
class NewsItem:
    """A news post from the news sheet."""
    date_en: str
    date_es: str
    title_en: str
    title_es: str
    description_en: str
    description_es: str
    img_src: str
    link: str


@dataclass
class CacheEntry:
    """Snapshot of one sheet as stored under a cache key."""
    key: str
    fetched_at: datetime
    payload: List[Record]

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def is_fresh(self, now: datetime, window: timedelta) -> bool:
        """True while the entry is younger than ``window``."""
        return self.age(now) < window


@dataclass
class SectionState:
    """Records of one section plus its show-all flag."""
    records: List[Record] = field(default_factory=list)
    expanded: bool = False


@dataclass
class PageSession:
    """State of one page load, owned by the orchestrator."""
    language: str = "en"
    sections: Dict[str, SectionState] = field(
        default_factory=lambda: {name: SectionState() for name in SECTIONS}
    )
    listeners_attached: Set[str] = field(default_factory=set)

    def section(self, name: str) -> SectionState:
        return self.sections[name]

    def load(self, name: str, records: List[Record]):
        """Replace a section's records and reset it to collapsed."""
        self.sections[name] = SectionState(records=list(records))
