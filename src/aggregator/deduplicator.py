"""Cross-source article deduplication.

Two articles are duplicates when they share a link (case-insensitive) or a
normalized headline. The headline key catches the same story syndicated
under different tracking URLs by different sources.
"""

import logging
from typing import Iterable, List, Optional

from src.models.schemas import Article
from src.utils.text import normalize_title

logger = logging.getLogger(__name__)


class Deduplicator:
    """
    Incremental deduplicator holding the keys of everything accepted so far.

    One instance belongs to one aggregation request.
    """

    def __init__(self, existing: Optional[Iterable[Article]] = None):
        self.articles: List[Article] = []
        self._links = set()
        self._titles = set()
        for article in existing or []:
            self._remember(article)

    def __len__(self) -> int:
        return len(self.articles)

    def _remember(self, article: Article) -> None:
        self.articles.append(article)
        self._links.add(article.link_key)
        # Headlines with no word characters fall back to link-only matching
        if article.title_key:
            self._titles.add(article.title_key)

    def is_duplicate(self, article: Article) -> bool:
        """Check an article against everything accepted so far."""
        if article.link_key in self._links:
            return True
        return bool(article.title_key) and article.title_key in self._titles

    def add(self, article: Article) -> bool:
        """Accept an article unless it duplicates one already held."""
        if self.is_duplicate(article):
            return False
        self._remember(article)
        return True

    def extend(self, incoming: Iterable[Article]) -> int:
        """Add a batch in order; returns how many were accepted."""
        added = 0
        for article in incoming:
            if self.add(article):
                added += 1
        return added


def merge(existing: List[Article], incoming: Iterable[Article]) -> List[Article]:
    """
    Append the non-duplicate articles of ``incoming`` to ``existing``.

    Args:
        existing: Articles already accepted; kept as-is and in order.
        incoming: Candidates, checked against ``existing`` and against the
            candidates accepted before them.

    Returns:
        A new list; neither argument is modified.
    """
    dedup = Deduplicator(existing)
    added = dedup.extend(incoming)
    logger.debug(f"Merged {added} new articles into {len(existing)} existing")
    return dedup.articles


__all__ = ["Deduplicator", "merge", "normalize_title"]
