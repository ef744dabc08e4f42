"""Escaping and URL helpers used when building HTML fragments."""
import re
from typing import Optional
from urllib.parse import quote

YOUTUBE_ID_PATTERN = re.compile(r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
YOUTUBE_ID_LENGTH = 11

THUMBNAIL_TRANSFORMATION = "/upload/w_200,h_300,c_pad,b_auto/"
PLACEHOLDER_SIGNATURE = "Martin%20Simonson"
PLACEHOLDER_BACKGROUND = "default_bg_kxcmab.png"

_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(value: Optional[str]) -> str:
    """
    Escape the five HTML-sensitive characters.

    Args:
        value: Text from a sheet cell (may be None)

    Returns:
        Escaped text, empty string for None or empty input
    """
    if not value:
        return ""
    for char, entity in _HTML_ESCAPES:
        value = value.replace(char, entity)
    return value


def youtube_video_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the video id from a YouTube link.

    Recognizes youtu.be, /v/, /u/x/, /embed/, watch?v= and &v= links.

    Args:
        url: Link from the talks sheet

    Returns:
        The 11-character id, or None
    """
    if not url:
        return None
    match = YOUTUBE_ID_PATTERN.match(url)
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return match.group(2)
    return None


def youtube_embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}"


def transform_cloudinary_url(url: Optional[str], transformation: str) -> Optional[str]:
    """Swap the first ``/upload/`` segment for ``transformation``."""
    if not url or "/upload/" not in url:
        return url
    return url.replace("/upload/", transformation, 1)


def thumbnail_url(img_src: str) -> str:
    """Pad a cover image to the 200x300 gallery thumbnail."""
    return transform_cloudinary_url(img_src, THUMBNAIL_TRANSFORMATION)


def placeholder_font_size(title: str) -> int:
    """Pick the overlay font size for a typographic cover."""
    if len(title) > 55:
        return 22
    if len(title) > 25:
        return 28
    return 32


def encode_uri_component(text: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(text, safe="-_.!~*'()")


def placeholder_cover_url(title: str, cloud_name: str) -> str:
    """
    Build a Cloudinary URL that renders ``title`` as a cover image.

    Args:
        title: Book title shown on the cover
        cloud_name: Cloudinary account name

    Returns:
        Image URL with a text overlay and the author signature
    """
    encoded_title = encode_uri_component(title.replace("'", "\\'"))
    font_size = placeholder_font_size(title)
    return (
        f"https://res.cloudinary.com/{cloud_name}/image/upload/w_200,h_300,c_fill/"
        f"l_text:Arial_{font_size}_bold:{encoded_title},co_rgb:333333,g_center,w_200,c_fit/"
        f"l_text:Arial_20:{PLACEHOLDER_SIGNATURE},co_rgb:333333,g_south,y_40/"
        f"{PLACEHOLDER_BACKGROUND}"
    )
