"""Text cleanup helpers shared by the source adapters and the deduplicator."""

import html
import re
from typing import Optional
from urllib.parse import urlparse


def clean_html(html_content: Optional[str]) -> str:
    """Remove HTML tags and decode entities."""
    if not html_content:
        return ""

    # Decode HTML entities
    text = html.unescape(html_content)

    # Remove HTML tags
    text = re.sub(r"<script[^>]*>.*?</script>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<style[^>]*>.*?</style>", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)

    # Some feeds double-escape their markup
    text = html.unescape(text)

    # Clean up whitespace
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def truncate(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters, trimming trailing whitespace."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip()


def normalize_title(title: Optional[str]) -> str:
    """
    Reduce a headline to its comparison key.

    Lowercases, drops punctuation and collapses whitespace, so
    "Solar Output Hits Record!" and "solar output hits record" compare equal.
    """
    if not title:
        return ""
    text = re.sub(r"[^\w\s]", "", title.lower())
    return re.sub(r"\s+", " ", text).strip()


def domain_of(url: Optional[str]) -> str:
    """Return the host of a URL without a leading ``www.``."""
    if not url:
        return ""
    netloc = urlparse(url).netloc.lower()
    # Drop credentials and port
    netloc = netloc.rsplit("@", 1)[-1].split(":", 1)[0]
    if netloc.startswith("www."):
        netloc = netloc[4:]
    return netloc
