"""Tests for request validation."""

import pytest

from src.aggregator.exceptions import InvalidRequest
from src.aggregator.query import build_query, clamp_min_articles, clean_topics
from src.config import Settings


class TestCleanTopics:
    """Tests for clean_topics()."""

    def test_trims_and_collapses_whitespace(self):
        assert clean_topics(["  solar   power ", "wind"], 10) == ["solar power", "wind"]

    def test_drops_blank_and_repeated_topics(self):
        assert clean_topics(["Solar", "", "solar", "  ", "SOLAR ", "wind"], 10) == ["Solar", "wind"]

    def test_caps_topic_count(self):
        topics = [f"topic {i}" for i in range(15)]
        assert clean_topics(topics, 10) == topics[:10]

    @pytest.mark.parametrize("topics", [[], ["", " "], None, "solar", {"solar": 1}, ["ok", None]])
    def test_rejects_unusable_topics(self, topics):
        with pytest.raises(InvalidRequest):
            clean_topics(topics, 10)


class TestClampMinArticles:
    """Tests for clamp_min_articles()."""

    @pytest.mark.parametrize("value,expected", [
        (None, 5),
        (True, 5),
        ("7", 5),
        (0, 5),
        (-1, 5),
        (float("nan"), 5),
        (7, 7),
        (7.9, 7),
        (0.5, 1),
        (20, 20),
        (21, 20),
        (float("inf"), 20),
    ])
    def test_clamp(self, value, expected):
        assert clamp_min_articles(value, default=5, maximum=20) == expected

    def test_default_above_maximum_is_capped(self):
        assert clamp_min_articles(None, default=50, maximum=20) == 20


def test_build_query_uses_settings():
    settings = Settings(max_topics=2, max_articles=4, default_min_articles=3)

    query = build_query(["a", "b", "c"], 10, settings)

    assert query.topics == ["a", "b"]
    assert query.min_articles == 4
