"""NewsAPI.org search source (requires an API key)."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from src.models.schemas import Article, TimeWindow, build_article
from src.sources.base import BaseSource, SourceError

logger = logging.getLogger(__name__)

# NewsAPI endpoint
NEWSAPI_EVERYTHING_URL = "https://newsapi.org/v2/everything"

# NewsAPI caps pageSize at 100
MAX_PAGE_SIZE = 100

# Placeholder values NewsAPI uses for articles taken down by the publisher
REMOVED_MARKER = "[Removed]"
REMOVED_URL = "https://removed.com"

FALLBACK_SUMMARY = "Latest news about {topics} from {source}."


def build_query(topics: Sequence[str]) -> str:
    """Combine topics into one boolean-OR search expression.

    Each topic becomes a quoted phrase. NewsAPI has no escape for a quote
    inside a phrase, so embedded double quotes are dropped.
    """
    phrases = [" ".join(topic.replace('"', " ").split()) for topic in topics]
    return " OR ".join(f'"{phrase}"' for phrase in phrases if phrase)


def is_removed(item: dict) -> bool:
    """Check whether NewsAPI flagged an item as removed."""
    title = (item.get("title") or "").strip()
    url = (item.get("url") or "").strip().rstrip("/").lower()
    return title == REMOVED_MARKER or url == REMOVED_URL


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    """Parse NewsAPI's ISO-8601 ``publishedAt``."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_item(item: dict, topics: Sequence[str]) -> Optional[Article]:
    """Convert one NewsAPI article dict to an Article, or None if unusable."""
    if is_removed(item):
        return None

    description = item.get("description") or ""
    content = item.get("content") or ""

    # NewsAPI truncates content with "[+N chars]", remove that
    if content and "[+" in content:
        content = content.split("[+")[0]

    source = item.get("source") or {}

    return build_article(
        title=item.get("title"),
        link=item.get("url"),
        summary=description or content,
        source=source.get("name") if isinstance(source, dict) else None,
        published_at=parse_published_at(item.get("publishedAt")),
        fallback_summary=FALLBACK_SUMMARY.replace("{topics}", ", ".join(topics)),
    )


class NewsAPISource(BaseSource):
    """
    Search NewsAPI.org's ``/v2/everything`` endpoint.

    All topics go into a single OR query per window. The source is disabled
    when no API key is configured and then contributes nothing.

    Free tier: 100 requests/day
    """

    name = "newsapi"
    accept = "application/json"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        language: str = "en",
    ):
        """
        Initialize the NewsAPI source.

        Args:
            api_key: NewsAPI API key. The source is skipped without one.
            timeout: Request timeout in seconds.
            language: ISO-639-1 language filter.
        """
        super().__init__(timeout)
        self._api_key = (api_key or "").strip() or None
        self.language = language

        if not self._api_key:
            logger.info("NewsAPI key not configured; NewsAPI source disabled")

    @property
    def is_configured(self) -> bool:
        """Check if NewsAPI is configured with an API key."""
        return bool(self._api_key)

    @property
    def is_enabled(self) -> bool:
        return self.is_configured

    async def fetch_topics(
        self,
        topics: Sequence[str],
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        """Fetch all topics with one combined request."""
        if not self.is_enabled or not topics:
            return []
        return await self._guarded(
            self._search(list(topics), window, max_candidates),
            f"topics {list(topics)}",
            window,
        )

    async def _fetch(
        self,
        topic: str,
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        return await self._search([topic], window, max_candidates)

    def build_params(
        self,
        topics: Sequence[str],
        window: TimeWindow,
        max_candidates: int,
    ) -> dict:
        """Query parameters for one search."""
        params = {
            "q": build_query(topics),
            "language": self.language,
            "sortBy": "publishedAt",
            "pageSize": max(1, min(max_candidates, MAX_PAGE_SIZE)),
        }
        start = window.start()
        if start is not None:
            params["from"] = start.replace(microsecond=0).isoformat()
        return params

    async def _search(
        self,
        topics: List[str],
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        client = await self.get_client()
        response = await client.get(
            NEWSAPI_EVERYTHING_URL,
            params=self.build_params(topics, window, max_candidates),
            headers={"X-Api-Key": self._api_key},
            timeout=self.timeout,
        )

        if response.status_code != 200:
            raise SourceError(f"NewsAPI returned status {response.status_code}")

        data = response.json()
        if data.get("status") != "ok":
            raise SourceError(
                f"NewsAPI error: {data.get('code', 'unknown')} - {data.get('message', '')}"
            )

        articles = []
        for item in data.get("articles") or []:
            article = parse_item(item, topics)
            if article is not None:
                articles.append(article)

        return articles[:max_candidates]
