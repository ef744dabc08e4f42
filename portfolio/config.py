"""Configuration management."""
import os
from typing import Dict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

_SHEETS_BASE = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vRQkpUHKd8MwQjurfSPkNia6Xfk-ydErSFgAPSiT-OzL59KYAbBxkgZdo-mSJKWtf3rulpf3037aLZD/pub"
)


class Config:
    """Application configuration."""

    # Database
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "portfoliodb")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")

    @property
    def DATABASE_URL(self):
        """Build PostgreSQL connection string."""
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # Published sheets (CSV output)
    BOOKS_SHEET_URL = os.getenv("BOOKS_SHEET_URL", f"{_SHEETS_BASE}?gid=0&single=true&output=csv")
    TALKS_SHEET_URL = os.getenv("TALKS_SHEET_URL", f"{_SHEETS_BASE}?gid=692236683&single=true&output=csv")
    NEWS_SHEET_URL = os.getenv("NEWS_SHEET_URL", f"{_SHEETS_BASE}?gid=195482197&single=true&output=csv")

    CACHE_KEYS = {
        "books": "booksCache",
        "talks": "talksCache",
        "news": "newsCache",
    }

    # Images
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "dzef5s7pq")

    # Defaults
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))
    CACHE_DURATION = int(os.getenv("CACHE_DURATION", "3600"))
    DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")

    def sheet_urls(self) -> Dict[str, str]:
        """Map each content category to its published CSV URL."""
        return {
            "books": self.BOOKS_SHEET_URL,
            "talks": self.TALKS_SHEET_URL,
            "news": self.NEWS_SHEET_URL,
        }
