"""GDELT DOC 2.0 article search source."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from src.models.schemas import Article, TimeWindow, build_article, utc_now
from src.sources.base import BaseSource, SourceError

logger = logging.getLogger(__name__)

GDELT_DOC_URL = "https://api.gdeltproject.org/api/v2/doc/doc"

# GDELT returns at most 250 records per query
MAX_RECORDS = 250

GDELT_DATE_FORMAT = "%Y%m%d%H%M%S"
SEENDATE_FORMATS = ["%Y%m%dT%H%M%SZ", GDELT_DATE_FORMAT]

FALLBACK_SUMMARY = "Latest news about {topic} from {source}."


def format_gdelt_datetime(value: datetime) -> str:
    """Format a datetime as GDELT's compact UTC ``YYYYMMDDHHMMSS``."""
    return value.astimezone(timezone.utc).strftime(GDELT_DATE_FORMAT)


def parse_seendate(value: Optional[str]) -> Optional[datetime]:
    """Parse GDELT's ``seendate`` (e.g. ``20250114T093000Z``) as UTC."""
    if not value:
        return None
    for fmt in SEENDATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def parse_item(item: dict, topic: str) -> Optional[Article]:
    """Convert one GDELT artlist record to an Article, or None if unusable."""
    domain = (item.get("domain") or "").strip()
    return build_article(
        title=item.get("title"),
        link=item.get("url"),
        source=domain or "GDELT",
        published_at=parse_seendate(item.get("seendate")),
        fallback_summary=FALLBACK_SUMMARY.replace("{topic}", topic),
    )


class GdeltSource(BaseSource):
    """
    Query the GDELT global news index.

    One request per topic. Bounded windows become explicit
    ``startdatetime``/``enddatetime`` parameters. GDELT answers errors with
    plain text or HTML under a 200 status, so the content type is checked
    before decoding and anything that is not JSON counts as no results.
    """

    name = "gdelt"
    accept = "application/json"

    def __init__(self, timeout: float = 10.0):
        """Initialize the GDELT source."""
        super().__init__(timeout)

    def build_params(
        self,
        topic: str,
        window: TimeWindow,
        max_candidates: int,
        now: Optional[datetime] = None,
    ) -> dict:
        """Query parameters for one search."""
        params = {
            "query": topic,
            "mode": "artlist",
            "format": "json",
            "sort": "DateDesc",
            "maxrecords": max(1, min(max_candidates, MAX_RECORDS)),
        }
        if not window.is_unbounded:
            now = now or utc_now()
            params["startdatetime"] = format_gdelt_datetime(window.start(now))
            params["enddatetime"] = format_gdelt_datetime(now)
        return params

    async def _fetch(
        self,
        topic: str,
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        client = await self.get_client()
        response = await client.get(
            GDELT_DOC_URL,
            params=self.build_params(topic, window, max_candidates),
            timeout=self.timeout,
        )

        if response.status_code != 200:
            raise SourceError(f"GDELT returned status {response.status_code}")

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type.lower():
            logger.warning(
                f"[gdelt] Non-JSON response for topic '{topic}'. "
                f"Content-Type: {content_type or 'missing'}. "
                f"Response: {response.text[:200]}"
            )
            return []

        data = response.json()
        items = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(items, list):
            return []

        articles = []
        for item in items:
            if not isinstance(item, dict):
                continue
            article = parse_item(item, topic)
            if article is not None:
                articles.append(article)
            if len(articles) >= max_candidates:
                break

        return articles
