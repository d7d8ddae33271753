"""Request validation for aggregation."""

import logging
import math
from typing import Any, List

from src.aggregator.exceptions import InvalidRequest
from src.config import Settings
from src.models.schemas import TopicQuery

logger = logging.getLogger(__name__)


def clean_topics(topics: Any, max_topics: int) -> List[str]:
    """
    Trim topics, drop blanks and case-insensitive repeats, and cap the count.

    Raises:
        InvalidRequest: If ``topics`` is not a list of strings or nothing
            usable is left.
    """
    if isinstance(topics, str) or not isinstance(topics, (list, tuple)):
        raise InvalidRequest("topics must be a list of strings")

    cleaned: List[str] = []
    seen = set()
    for topic in topics:
        if not isinstance(topic, str):
            raise InvalidRequest("topics must be a list of strings")
        topic = " ".join(topic.split())
        if not topic or topic.lower() in seen:
            continue
        seen.add(topic.lower())
        cleaned.append(topic)

    if not cleaned:
        raise InvalidRequest("At least one non-empty topic is required")

    if len(cleaned) > max_topics:
        logger.info(f"Capping {len(cleaned)} topics to the first {max_topics}")
        cleaned = cleaned[:max_topics]

    return cleaned


def clamp_min_articles(min_articles: Any, default: int, maximum: int) -> int:
    """Fall back to ``default`` for missing or non-positive counts; cap at ``maximum``."""
    if isinstance(min_articles, bool) or not isinstance(min_articles, (int, float)):
        return min(default, maximum)
    if math.isnan(min_articles) or min_articles <= 0:
        return min(default, maximum)
    if math.isinf(min_articles):
        return maximum
    return max(1, min(int(min_articles), maximum))


def build_query(topics: Any, min_articles: Any, settings: Settings) -> TopicQuery:
    """Validate raw request parameters into a TopicQuery."""
    return TopicQuery(
        topics=clean_topics(topics, settings.max_topics),
        min_articles=clamp_min_articles(
            min_articles,
            settings.default_min_articles,
            settings.max_articles,
        ),
    )
