"""FastAPI application exposing the news aggregator."""

import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.aggregator import InvalidRequest, NewsAggregator, NoArticlesFound
from src.config import Settings, get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Global aggregator instance
aggregator: Optional[NewsAggregator] = None


class NewsRequest(BaseModel):
    """Body of ``POST /api/news``. Values are validated by the aggregator."""

    topics: Any = Field(default=None, description="Search phrases")
    minArticles: Any = Field(default=None, description="Target article count")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    global aggregator
    logger.info("Starting news aggregation API...")
    aggregator = NewsAggregator(settings=settings)
    yield
    logger.info("Shutting down news aggregation API...")
    if aggregator:
        await aggregator.close()


app = FastAPI(
    title="News Aggregation API",
    description=(
        "Collects recent articles on the requested topics from Google News, "
        "NewsAPI and GDELT, deduplicated and sorted newest first."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_aggregator() -> NewsAggregator:
    """Dependency returning the process-wide aggregator."""
    if aggregator is None:
        raise RuntimeError("Aggregator not initialized")
    return aggregator


def get_app_settings() -> Settings:
    return settings


@app.get("/api/health")
async def health_check(app_settings: Settings = Depends(get_app_settings)):
    """Health check endpoint."""
    return {"ok": True, "has_newsapi_key": app_settings.has_newsapi}


@app.post("/api/news")
async def fetch_news(
    request: NewsRequest,
    news: NewsAggregator = Depends(get_aggregator),
):
    """
    Fetch fresh articles for the requested topics.

    Returns a JSON array of ``{title, summary, source, link, publishedAt}``.
    """
    try:
        articles = await news.aggregate(request.topics, request.minArticles)
    except InvalidRequest as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except NoArticlesFound as e:
        return JSONResponse(status_code=404, content={"error": str(e)})
    except Exception:
        logger.exception("[/api/news] error")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch news"})

    payload: List[dict] = [article.to_wire() for article in articles]
    logger.info(f"[/api/news] Successfully returning {len(payload)} articles")
    return payload

