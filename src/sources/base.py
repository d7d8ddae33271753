"""Base source interface and common utilities."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

import httpx

from src.models.schemas import Article, TimeWindow

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """Raised inside a source when a fetch fails.

    Never escapes ``BaseSource.fetch``; callers only ever see an empty list.
    """

    pass


def dedupe_by_link(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article for each case-insensitive link."""
    seen = set()
    unique = []
    for article in articles:
        if article.link_key in seen:
            continue
        seen.add(article.link_key)
        unique.append(article)
    return unique


class BaseSource(ABC):
    """
    Abstract base class for news sources.

    Subclasses implement ``_fetch`` and may raise freely; ``fetch`` enforces
    the per-call timeout and turns every failure into an empty result.
    """

    name: str = "base"
    accept: str = "*/*"

    def __init__(self, timeout: float = 10.0):
        """Initialize the source with a per-call timeout."""
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_enabled(self) -> bool:
        """Whether this source should be queried at all."""
        return True

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": (
                        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                        "AppleWebKit/537.36 (KHTML, like Gecko) "
                        "Chrome/120.0.0.0 Safari/537.36"
                    ),
                    "Accept": self.accept,
                    "Accept-Language": "en-US,en;q=0.5",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch(
        self,
        topic: str,
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        """
        Fetch articles about one topic published within ``window``.

        Args:
            topic: Search phrase.
            window: Recency cutoff passed to the provider where supported.
            max_candidates: Upper bound on the number of items requested.

        Returns:
            Articles unique by link. Empty on any failure or timeout.
        """
        if not self.is_enabled:
            return []
        return await self._guarded(
            self._fetch(topic, window, max_candidates),
            f"topic '{topic}'",
            window,
        )

    async def fetch_topics(
        self,
        topics: Sequence[str],
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        """
        Fetch every topic concurrently and concatenate the results.

        Sources that can query several topics at once override this.
        """
        if not self.is_enabled:
            return []
        batches = await asyncio.gather(
            *(self.fetch(topic, window, max_candidates) for topic in topics)
        )
        return [article for batch in batches for article in batch]

    async def _guarded(self, call, what: str, window: TimeWindow) -> List[Article]:
        """Run a provider call under the timeout, logging and swallowing failures."""
        try:
            articles = await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"[{self.name}] Timed out after {self.timeout}s for {what} (window {window})"
            )
            return []
        except Exception as e:
            logger.warning(f"[{self.name}] Failed to fetch {what} (window {window}): {e}")
            return []

        articles = dedupe_by_link(articles)
        logger.debug(f"[{self.name}] {len(articles)} articles for {what} (window {window})")
        return articles

    @abstractmethod
    async def _fetch(
        self,
        topic: str,
        window: TimeWindow,
        max_candidates: int,
    ) -> List[Article]:
        """
        Query the provider for one topic.

        Raises:
            SourceError: Or any other exception; ``fetch`` contains it.
        """
        pass
