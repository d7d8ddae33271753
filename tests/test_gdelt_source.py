"""Tests for the GDELT source."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.models.schemas import UNBOUNDED_WINDOW, parse_window
from src.sources.gdelt import (
    GDELT_DOC_URL,
    GdeltSource,
    format_gdelt_datetime,
    parse_item,
    parse_seendate,
)


SAMPLE_GDELT_RESPONSE = {
    "articles": [
        {
            "url": "https://www.energy-daily.example/heat-pumps",
            "url_mobile": "",
            "title": "Heat pump sales surge across Europe",
            "seendate": "20250601T101500Z",
            "socialimage": "",
            "domain": "energy-daily.example",
            "language": "English",
            "sourcecountry": "Germany",
        },
        {
            "url": "ftp://bad.example/file",
            "title": "Not a web link",
            "seendate": "20250601T100000Z",
            "domain": "bad.example",
        },
        {
            "url": "https://www.energy-daily.example/heat-pumps",
            "title": "Heat pump sales surge across Europe (repost)",
            "seendate": "20250601T100000Z",
            "domain": "energy-daily.example",
        },
        {
            "url": "https://grid.example.net/solar-record",
            "title": "Solar record set on the grid",
            "seendate": "garbage",
            "domain": "",
        },
    ]
}


def mock_response(
    payload=SAMPLE_GDELT_RESPONSE,
    content_type: str = "application/json; charset=utf-8",
    status_code: int = 200,
    text: str = "",
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = {"content-type": content_type}
    response.text = text
    response.json.return_value = payload
    return response


class TestHelpers:
    """Tests for GDELT date helpers and item parsing."""

    def test_format_gdelt_datetime(self):
        value = datetime(2025, 6, 1, 9, 5, 3, 123456, tzinfo=timezone.utc)
        assert format_gdelt_datetime(value) == "20250601090503"

    @pytest.mark.parametrize("raw,expected", [
        ("20250601T101500Z", datetime(2025, 6, 1, 10, 15, tzinfo=timezone.utc)),
        ("20250601101500", datetime(2025, 6, 1, 10, 15, tzinfo=timezone.utc)),
        ("garbage", None),
        (None, None),
    ])
    def test_parse_seendate(self, raw, expected):
        assert parse_seendate(raw) == expected

    def test_parse_item_synthesizes_summary(self):
        article = parse_item(SAMPLE_GDELT_RESPONSE["articles"][0], "heat pumps")

        assert article.source == "energy-daily.example"
        assert article.summary == "Latest news about heat pumps from energy-daily.example."
        assert article.published_at == datetime(2025, 6, 1, 10, 15, tzinfo=timezone.utc)

    def test_parse_item_without_domain_uses_gdelt(self):
        article = parse_item(SAMPLE_GDELT_RESPONSE["articles"][3], "solar")
        assert article.source == "GDELT"


class TestGdeltSource:
    """Tests for GdeltSource."""

    @pytest.fixture
    def source(self):
        return GdeltSource(timeout=5)

    def test_params_for_bounded_window(self, source):
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        params = source.build_params("solar", parse_window("6h"), 30, now=now)

        assert params["query"] == "solar"
        assert params["mode"] == "artlist"
        assert params["format"] == "json"
        assert params["maxrecords"] == 30
        assert params["startdatetime"] == "20250601060000"
        assert params["enddatetime"] == "20250601120000"

    def test_params_for_unbounded_window(self, source):
        params = source.build_params("solar", UNBOUNDED_WINDOW, 1000)

        assert "startdatetime" not in params
        assert "enddatetime" not in params
        assert params["maxrecords"] == 250

    @pytest.mark.asyncio
    async def test_fetch_success(self, source):
        with patch.object(source, 'get_client') as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=mock_response())
            mock_get_client.return_value = mock_client

            articles = await source.fetch("heat pumps", UNBOUNDED_WINDOW, 30)

            assert mock_client.get.call_args.args[0] == GDELT_DOC_URL
            assert [a.title for a in articles] == [
                "Heat pump sales surge across Europe",
                "Solar record set on the grid",
            ]

    @pytest.mark.asyncio
    async def test_non_json_response_is_empty_not_error(self, source):
        response = mock_response(
            content_type="text/html",
            text="Your query was too short or too long.",
        )
        response.json.side_effect = ValueError("not json")

        with patch.object(source, 'get_client') as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=response)
            mock_get_client.return_value = mock_client

            assert await source.fetch("ai", parse_window("2h"), 30) == []
            response.json.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_articles_key_is_empty(self, source):
        with patch.object(source, 'get_client') as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=mock_response(payload={}))
            mock_get_client.return_value = mock_client

            assert await source.fetch("solar", UNBOUNDED_WINDOW, 30) == []

    @pytest.mark.asyncio
    async def test_http_error_returns_empty(self, source):
        with patch.object(source, 'get_client') as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=mock_response(status_code=500))
            mock_get_client.return_value = mock_client

            assert await source.fetch("solar", UNBOUNDED_WINDOW, 30) == []

    @pytest.mark.asyncio
    async def test_fetch_topics_one_request_per_topic(self, source):
        with patch.object(source, 'get_client') as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=mock_response(payload={"articles": []}))
            mock_get_client.return_value = mock_client

            await source.fetch_topics(["solar", "wind", "hydro"], parse_window("24h"), 30)

            assert mock_client.get.await_count == 3
