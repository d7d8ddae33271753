"""News aggregation and deduplication module.

This module searches every configured source over progressively wider time
windows, merges the results without duplicates and returns the freshest
articles.
"""

from src.aggregator.deduplicator import Deduplicator, merge
from src.aggregator.exceptions import AggregationError, InvalidRequest, NoArticlesFound
from src.aggregator.freshness import filter_fresh, is_fresh
from src.aggregator.orchestrator import NewsAggregator, aggregate_news
from src.aggregator.widening import ProgressiveWidener, WideningResult

__all__ = [
    "AggregationError",
    "Deduplicator",
    "InvalidRequest",
    "NewsAggregator",
    "NoArticlesFound",
    "ProgressiveWidener",
    "WideningResult",
    "aggregate_news",
    "filter_fresh",
    "is_fresh",
    "merge",
]
