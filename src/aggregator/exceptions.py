"""Errors that cross the aggregation boundary."""

from typing import Sequence


class AggregationError(Exception):
    """Base class for aggregation failures."""

    pass


class InvalidRequest(AggregationError):
    """Raised when the topics or parameters of a request are unusable."""

    pass


class NoArticlesFound(AggregationError):
    """Raised when no source produced any usable article in any window.

    This is a user-actionable outcome rather than an infrastructure fault:
    the caller should suggest different or broader topics.
    """

    def __init__(self, topics: Sequence[str]):
        self.topics = list(topics)
        super().__init__(
            f"No articles found for topics: {', '.join(self.topics)}. "
            "Try different or broader topics."
        )
