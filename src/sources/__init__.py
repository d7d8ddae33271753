"""News sources that search a provider by topic and return Articles."""

from typing import List

from src.config import Settings
from .base import BaseSource, SourceError
from .gdelt import GdeltSource
from .google_news import GoogleNewsSource
from .newsapi import NewsAPISource


def build_sources(settings: Settings) -> List[BaseSource]:
    """Create the default source list from settings."""
    sources: List[BaseSource] = []
    if settings.google_news_enabled:
        sources.append(GoogleNewsSource(timeout=settings.google_news_timeout))
    sources.append(
        NewsAPISource(api_key=settings.newsapi_key, timeout=settings.newsapi_timeout)
    )
    if settings.gdelt_enabled:
        sources.append(GdeltSource(timeout=settings.gdelt_timeout))
    return sources


__all__ = [
    "BaseSource",
    "GdeltSource",
    "GoogleNewsSource",
    "NewsAPISource",
    "SourceError",
    "build_sources",
]
