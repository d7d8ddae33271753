"""Pydantic models shared across the aggregation pipeline."""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.text import clean_html, domain_of, normalize_title, truncate
from src.utils.url_validator import validate_url

MAX_TITLE_LENGTH = 200
MAX_SUMMARY_LENGTH = 300

_WINDOW_PATTERN = re.compile(r"^\s*(\d+)\s*([mhd])\s*$", re.IGNORECASE)
_WINDOW_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Article(BaseModel):
    """A normalized news article, identical in shape across every source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(description="Display headline")
    summary: str = Field(default="", description="Plain-text synopsis")
    source: str = Field(default="", description="Publisher or domain")
    link: str = Field(description="Absolute http(s) URL")
    published_at: datetime = Field(
        default_factory=utc_now,
        alias="publishedAt",
        description="Publication time (UTC)",
    )

    @field_validator("title")
    @classmethod
    def _clean_title(cls, value: str) -> str:
        value = truncate(clean_html(value), MAX_TITLE_LENGTH)
        if not value:
            raise ValueError("title cannot be empty")
        return value

    @field_validator("summary")
    @classmethod
    def _clean_summary(cls, value: str) -> str:
        return truncate(clean_html(value), MAX_SUMMARY_LENGTH)

    @field_validator("link")
    @classmethod
    def _check_link(cls, value: str) -> str:
        result = validate_url(value)
        if not result.is_valid:
            raise ValueError(result.error)
        return result.url

    @field_validator("published_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def link_key(self) -> str:
        """Case-insensitive link used for deduplication."""
        return self.link.lower()

    @property
    def title_key(self) -> str:
        """Normalized headline used for deduplication."""
        return normalize_title(self.title)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the JSON shape consumed by the generation layer."""
        return self.model_dump(mode="json", by_alias=True)


def build_article(
    title: Optional[str],
    link: Optional[str],
    summary: Optional[str] = None,
    source: Optional[str] = None,
    published_at: Optional[datetime] = None,
    fallback_summary: Optional[str] = None,
) -> Optional[Article]:
    """
    Build an Article from loosely-typed source fields.

    Missing optional fields get derived defaults: the source falls back to
    the link's domain and the summary to ``fallback_summary`` (where
    ``{source}`` is substituted). Returns None when the item has no usable
    title or link instead of raising.
    """
    title = clean_html(title)
    link = (link or "").strip()
    if not title or not link or not validate_url(link).is_valid:
        return None

    source = clean_html(source) or domain_of(link) or "Unknown"
    summary = clean_html(summary)
    if not summary and fallback_summary:
        summary = fallback_summary.replace("{source}", source)

    return Article(
        title=title,
        summary=summary,
        source=source,
        link=link,
        published_at=published_at or utc_now(),
    )


class TimeWindow(BaseModel):
    """A recency cutoff; ``duration`` of None means no limit."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    duration: Optional[timedelta] = None

    @property
    def is_unbounded(self) -> bool:
        return self.duration is None

    def start(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """Earliest publication time this window admits."""
        if self.duration is None:
            return None
        return (now or utc_now()) - self.duration

    def __str__(self) -> str:
        return self.label or "unlimited"


UNBOUNDED_WINDOW = TimeWindow(label="", duration=None)


def parse_window(label: str) -> TimeWindow:
    """
    Parse a compact window label such as ``30m``, ``6h`` or ``7d``.

    Raises:
        ValueError: If the label is not a positive amount of minutes,
            hours or days.
    """
    match = _WINDOW_PATTERN.match(label or "")
    if not match:
        raise ValueError(f"Invalid time window: {label!r}")
    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Time window must be positive: {label!r}")
    unit = match.group(2).lower()
    return TimeWindow(
        label=f"{amount}{unit}",
        duration=timedelta(**{_WINDOW_UNITS[unit]: amount}),
    )


def build_windows(labels: List[str]) -> List[TimeWindow]:
    """Sort bounded windows narrowest first and close with one unbounded pass."""
    windows: Dict[timedelta, TimeWindow] = {}
    for label in labels:
        window = parse_window(label)
        windows.setdefault(window.duration, window)
    ordered = [windows[d] for d in sorted(windows)]
    return ordered + [UNBOUNDED_WINDOW]


class TopicQuery(BaseModel):
    """A validated aggregation request."""

    model_config = ConfigDict(frozen=True)

    topics: List[str] = Field(min_length=1)
    min_articles: int = Field(gt=0)
