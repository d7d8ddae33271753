"""Progressive time-window search across all sources."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from src.aggregator.deduplicator import Deduplicator
from src.aggregator.freshness import filter_fresh
from src.models.schemas import Article, TimeWindow, utc_now
from src.sources.base import BaseSource

logger = logging.getLogger(__name__)


@dataclass
class WideningResult:
    """Accumulated articles and the windows that were searched to get them."""
    articles: List[Article] = field(default_factory=list)
    windows_searched: List[TimeWindow] = field(default_factory=list)


class ProgressiveWidener:
    """
    Search narrow windows first and widen only while results are short.

    For each window every source is queried for every topic concurrently.
    Once all of them have answered, stale items are dropped, survivors are
    merged into the accumulator (deduplicated against everything found in
    earlier windows too), and the search stops as soon as the accumulator
    holds ``min_articles``. The last window should be unbounded so the
    floor can always be reached if any source has anything.
    """

    def __init__(
        self,
        sources: Sequence[BaseSource],
        windows: Sequence[TimeWindow],
        max_candidates: int = 30,
    ):
        if not windows:
            raise ValueError("At least one time window is required")
        self.sources = list(sources)
        self.windows = list(windows)
        self.max_candidates = max_candidates

    async def _search_window(
        self,
        topics: Sequence[str],
        window: TimeWindow,
    ) -> List[List[Article]]:
        return await asyncio.gather(
            *(
                source.fetch_topics(topics, window, self.max_candidates)
                for source in self.sources
            )
        )

    async def run(self, topics: Sequence[str], min_articles: int) -> WideningResult:
        """
        Widen the search until ``min_articles`` unique articles are found.

        Args:
            topics: Search phrases.
            min_articles: Stop once the accumulator reaches this size.

        Returns:
            WideningResult with accumulated articles in acceptance order.
        """
        result = WideningResult()
        accumulator = Deduplicator()

        for window in self.windows:
            batches = await self._search_window(topics, window)
            now = utc_now()

            found = 0
            added = 0
            for source, batch in zip(self.sources, batches):
                fresh = filter_fresh(batch, window, now)
                found += len(fresh)
                added += accumulator.extend(fresh)
                if len(fresh) < len(batch):
                    logger.debug(
                        f"[{source.name}] Dropped {len(batch) - len(fresh)} stale articles "
                        f"(window {window})"
                    )

            result.windows_searched.append(window)
            logger.info(
                f"Time window '{window}': found {found} articles, "
                f"{added} new, total {len(accumulator)}"
            )

            if len(accumulator) >= min_articles:
                break

        result.articles = accumulator.articles
        return result
