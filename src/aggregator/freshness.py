"""Recency checks against a time window."""

from datetime import datetime
from typing import Iterable, List, Optional

from src.models.schemas import Article, TimeWindow, as_utc, utc_now


def is_fresh(
    published_at: datetime,
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> bool:
    """
    Check whether a publication time falls inside ``window``.

    The boundary is inclusive: an article published exactly
    ``window.duration`` ago is still fresh. Unbounded windows accept
    everything.
    """
    if window.is_unbounded:
        return True
    now = as_utc(now) if now else utc_now()
    return now - as_utc(published_at) <= window.duration


def filter_fresh(
    articles: Iterable[Article],
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> List[Article]:
    """Keep only the articles that are fresh for ``window``."""
    if window.is_unbounded:
        return list(articles)
    now = now or utc_now()
    return [a for a in articles if is_fresh(a.published_at, window, now)]
