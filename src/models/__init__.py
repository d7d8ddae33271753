"""Pydantic models for structured data."""

from .schemas import (
    UNBOUNDED_WINDOW,
    Article,
    TimeWindow,
    TopicQuery,
    build_article,
    build_windows,
    parse_window,
)

__all__ = [
    "UNBOUNDED_WINDOW",
    "Article",
    "TimeWindow",
    "TopicQuery",
    "build_article",
    "build_windows",
    "parse_window",
]
