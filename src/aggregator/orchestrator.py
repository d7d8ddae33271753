"""Aggregation entry point: validate, search, rank and return articles."""

import asyncio
import logging
from typing import Any, List, Optional, Sequence

from src.aggregator.exceptions import NoArticlesFound
from src.aggregator.query import build_query
from src.aggregator.widening import ProgressiveWidener
from src.config import Settings, get_settings
from src.models.schemas import Article, TimeWindow, build_windows
from src.sources import BaseSource, build_sources
from src.utils.url_validator import LinkValidator

logger = logging.getLogger(__name__)


class NewsAggregator:
    """
    Collect fresh, deduplicated articles for a set of topics.

    Orchestrates:
    1. Request validation
    2. Progressive window search across all sources
    3. Recency ranking and truncation
    4. Advisory link checks on the top results

    An instance holds only configuration and HTTP clients, so concurrent
    ``aggregate`` calls do not share results.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        sources: Optional[Sequence[BaseSource]] = None,
        link_validator: Optional[LinkValidator] = None,
        windows: Optional[Sequence[TimeWindow]] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            settings: Configuration; read from the environment if omitted.
            sources: Sources to query; built from settings if omitted.
            link_validator: Probe for top links; built from settings if
                omitted and link validation is enabled.
            windows: Search windows; built from settings if omitted.
        """
        self.settings = settings or get_settings()
        self.sources = list(sources) if sources is not None else build_sources(self.settings)
        self.windows = list(windows) if windows is not None else build_windows(
            self.settings.time_windows
        )

        if link_validator is None and self.settings.validate_links:
            link_validator = LinkValidator(timeout=self.settings.link_check_timeout)
        self.link_validator = link_validator

    async def __aenter__(self) -> "NewsAggregator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close all HTTP clients."""
        closers = [source.close() for source in self.sources]
        if self.link_validator is not None:
            closers.append(self.link_validator.close())
        await asyncio.gather(*closers)

    async def aggregate(self, topics: Any, min_articles: Any = None) -> List[Article]:
        """
        Find up to ``min_articles`` recent articles about ``topics``.

        Args:
            topics: List of search phrases.
            min_articles: Target count; defaulted and clamped per settings.

        Returns:
            Non-empty list of articles, newest first.

        Raises:
            InvalidRequest: If no usable topic was given.
            NoArticlesFound: If every source came back empty in every window.
        """
        query = build_query(topics, min_articles, self.settings)
        logger.info(
            f"Fetching news for topics: {', '.join(query.topics)} "
            f"(target {query.min_articles})"
        )

        widener = ProgressiveWidener(
            self.sources,
            self.windows,
            max_candidates=self.settings.max_candidates_per_topic,
        )
        result = await widener.run(query.topics, query.min_articles)

        articles = sorted(result.articles, key=lambda a: a.published_at, reverse=True)
        articles = articles[: query.min_articles]

        if not articles:
            logger.warning(f"No articles found for topics: {', '.join(query.topics)}")
            raise NoArticlesFound(query.topics)

        await self._check_links(articles)

        logger.info(
            f"Returning {len(articles)} articles after searching "
            f"{len(result.windows_searched)} time window(s)"
        )
        return articles

    async def _check_links(self, articles: List[Article]) -> None:
        """Probe the top links and log failures; never filters anything."""
        if self.link_validator is None or self.settings.validate_top_n <= 0:
            return

        top = [a.link for a in articles[: self.settings.validate_top_n]]
        try:
            results = await self.link_validator.check_many(top)
        except Exception as e:
            logger.warning(f"Link validation error: {e}")
            return

        for link, is_valid in results.items():
            if not is_valid:
                logger.warning(f"Link validation failed for: {link}")


async def aggregate_news(
    topics: Any,
    min_articles: Any = None,
    settings: Optional[Settings] = None,
) -> List[Article]:
    """
    Convenience function to run one aggregation with a fresh aggregator.

    Args:
        topics: List of search phrases.
        min_articles: Target number of articles.
        settings: Optional settings (environment is used if not provided).

    Returns:
        Articles, newest first.
    """
    async with NewsAggregator(settings=settings) as aggregator:
        return await aggregator.aggregate(topics, min_articles)
