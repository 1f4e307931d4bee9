from __future__ import annotations

import re
from urllib.parse import urlsplit

# Loose URL scan over free text (e-mail bodies); candidates are validated below.
_URL_RE = re.compile(r"https?://[^\s<>\"'()\[\]]+", re.IGNORECASE)
_TRAILING_PUNCT = ".,;:!?"


def iter_urls(text: str):
    for match in _URL_RE.finditer(text or ""):
        yield match.group(0).rstrip(_TRAILING_PUNCT)


def is_youtube_watch_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.hostname == "www.youtube.com" and parts.path == "/watch"


def extract_youtube_link(text: str) -> str | None:
    """First `https://www.youtube.com/watch?...` link found in `text`."""

    for url in iter_urls(text):
        if is_youtube_watch_url(url):
            return url
    return None
