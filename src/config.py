"""Configuration management for the news aggregation service."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # NewsAPI (optional - the adapter is skipped when no key is set)
    newsapi_key: Optional[str] = None

    # Sources
    google_news_enabled: bool = True
    gdelt_enabled: bool = True

    # Per-call timeouts (seconds)
    google_news_timeout: float = 8.0
    newsapi_timeout: float = 10.0
    gdelt_timeout: float = 10.0
    link_check_timeout: float = 3.0

    # Progressive search windows, narrowest first. An unbounded pass is
    # always appended after the last one.
    time_windows: List[str] = ["30m", "2h", "6h", "24h"]
    max_candidates_per_topic: int = 30

    # Request limits
    default_min_articles: int = 5
    max_articles: int = 20
    max_topics: int = 10

    # Link checks on the top results (logged only)
    validate_links: bool = True
    validate_top_n: int = 3

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 5174

    # Application Settings
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def has_newsapi(self) -> bool:
        """Check if NewsAPI is configured."""
        return bool(self.newsapi_key and self.newsapi_key.strip())


def get_settings() -> Settings:
    """Get application settings from the environment and .env file."""
    return Settings()
