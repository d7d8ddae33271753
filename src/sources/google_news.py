"""Google News RSS search source."""

import calendar
import logging
from datetime import datetime, timezone
from typing import List, Optional

import feedparser

from src.models.schemas import Article, TimeWindow, as_utc, build_article
from src.sources.base import BaseSource, SourceError

logger = logging.getLogger(__name__)

GOOGLE_NEWS_SEARCH_URL = "https://news.google.com/rss/search"

FALLBACK_SUMMARY = "Latest coverage of {topic} from {source}."

DATE_FORMATS = [
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d",
]


def parse_entry_date(entry: dict) -> Optional[datetime]:
    """Parse the publication date of a feed entry as UTC."""
    # feedparser normalizes dates to UTC struct_time
    for field in ("published_parsed", "updated_parsed"):
        parsed = entry.get(field)
        if parsed:
            try:
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
            except (ValueError, OverflowError, TypeError):
                pass

    # Try parsing string dates
    for field in ("published", "updated", "pubDate"):
        raw = entry.get(field)
        if not raw:
            continue
        for fmt in DATE_FORMATS:
            try:
                return as_utc(datetime.strptime(raw.strip(), fmt))
            except ValueError:
                continue

    return None


def parse_feed_entry(entry: dict, topic: str) -> Optional[Article]:
    """
    Turn one feed item into an Article.

    Google News titles usually end in " - Publisher"; the publisher also
    appears in the <source> element, which is preferred when present.
    Returns None for items without a title or a usable link.
    """
    source_info = entry.get("source") or {}
    source = source_info.get("title") if hasattr(source_info, "get") else None

    title = entry.get("title", "")
    if source and title.endswith(f" - {source}"):
        title = title[: -len(f" - {source}")]

    return build_article(
        title=title,
        link=entry.get("link"),
        summary=entry.get("summary") or entry.get("description"),
        source=source,
        published_at=parse_entry_date(entry),
        fallback_summary=FALLBACK_SUMMARY.replace("{topic}", topic),
    )


class GoogleNewsSource(BaseSource):
    """
    Search Google News through its public RSS endpoint.

    One request per (topic, window). Bounded windows are expressed with the
    ``when:`` search operator; the unbounded pass omits it.
    """

    name = "google_news"
    accept = "application/rss+xml, application/xml, text/xml"

    def __init__(
        self,
        timeout: float = 8.0,
        language: str = "en-US",
        country: str = "US",
    ):
        """Initialize the Google News source."""
        super().__init__(timeout)
        self.language = language
        self.country = country

    def build_params(self, topic: str, window: TimeWindow) -> dict:
        """Query parameters for one search."""
        query = topic if window.is_unbounded else f"{topic} when:{window.label}"
        return {
            "q": query,
            "hl": self.language,
            "gl": self.country,
            "ceid": f"{self.country}:{self.language.split('-')[0]}",
        }

    async def _fetch(
        self,
        topic: str,
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        client = await self.get_client()
        response = await client.get(
            GOOGLE_NEWS_SEARCH_URL,
            params=self.build_params(topic, window),
            timeout=self.timeout,
        )

        if response.status_code != 200:
            raise SourceError(f"Google News returned status {response.status_code}")

        feed = feedparser.parse(response.text)

        if feed.bozo and not feed.entries:
            raise SourceError(f"Invalid RSS feed for topic '{topic}'")

        articles = []
        for entry in feed.entries:
            article = parse_feed_entry(entry, topic)
            if article is None:
                logger.debug(f"Skipping unusable feed item: {entry.get('title', 'Untitled')}")
                continue
            articles.append(article)
            if len(articles) >= max_candidates:
                break

        return articles
