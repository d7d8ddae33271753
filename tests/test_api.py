"""Tests for the FastAPI routes."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.aggregator import InvalidRequest, NoArticlesFound
from src.api.main import app, get_aggregator, get_app_settings
from src.config import Settings
from src.models.schemas import Article

ARTICLE = Article(
    title="Offshore wind capacity doubles",
    summary="Capacity grew sharply.",
    source="Reuters",
    link="https://www.reuters.com/wind",
    published_at=datetime(2025, 6, 1, 11, 30, tzinfo=timezone.utc),
)


@pytest.fixture
def aggregator():
    mock = MagicMock()
    mock.aggregate = AsyncMock(return_value=[ARTICLE])
    return mock


@pytest.fixture
def client(aggregator):
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    app.dependency_overrides[get_app_settings] = lambda: Settings(newsapi_key=None)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "has_newsapi_key": False}


def test_news_returns_wire_articles(client, aggregator):
    response = client.post("/api/news", json={"topics": ["wind"], "minArticles": 3})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert set(body[0]) == {"title", "summary", "source", "link", "publishedAt"}
    assert body[0]["link"] == "https://www.reuters.com/wind"
    aggregator.aggregate.assert_awaited_once_with(["wind"], 3)


def test_news_invalid_request(client, aggregator):
    aggregator.aggregate.side_effect = InvalidRequest("At least one non-empty topic is required")

    response = client.post("/api/news", json={"topics": []})

    assert response.status_code == 400
    assert "topic" in response.json()["error"]


def test_news_no_articles(client, aggregator):
    aggregator.aggregate.side_effect = NoArticlesFound(["xyzzy"])

    response = client.post("/api/news", json={"topics": ["xyzzy"], "minArticles": 5})

    assert response.status_code == 404
    assert "Try different or broader topics" in response.json()["error"]


def test_news_unexpected_error(client, aggregator):
    aggregator.aggregate.side_effect = RuntimeError("boom")

    response = client.post("/api/news", json={"topics": ["wind"]})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch news"}
