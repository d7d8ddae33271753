"""Command-line interface for the news aggregator."""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from src.aggregator import InvalidRequest, NoArticlesFound, aggregate_news
from src.config import get_settings
from src.models.schemas import Article

# Configure logging with Rich handler for better formatting
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="news-aggregator",
    help="Fetch fresh, deduplicated news articles for a set of topics",
)
console = Console()


@app.command()
def fetch(
    topics: List[str] = typer.Argument(..., help="Topics to search for"),
    min_articles: Optional[int] = typer.Option(
        None, "--min-articles", "-n", help="Number of articles to return"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file path (JSON)"
    ),
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON only"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """Fetch the newest articles for one or more topics."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    try:
        if json_output:
            articles = asyncio.run(aggregate_news(topics, min_articles))
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Searching news sources...", total=None)
                articles = asyncio.run(aggregate_news(topics, min_articles))
                progress.update(task, completed=True)
    except InvalidRequest as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    except NoArticlesFound as e:
        console.print(f"[yellow]No articles:[/yellow] {e}")
        raise typer.Exit(1)

    output_json = json.dumps([a.to_wire() for a in articles], indent=2)

    if json_output:
        if output:
            output.write_text(output_json)
        else:
            print(output_json)
        return

    _display_articles(articles)

    if output:
        output.write_text(output_json)
        console.print(f"\n[green]Results saved to:[/green] {output}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"Starting API server at http://{host}:{port}")
    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def check_config():
    """Check configuration and API keys."""
    settings = get_settings()

    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Value")

    table.add_row("Google News", "✅" if settings.google_news_enabled else "⚠️",
                  "Enabled" if settings.google_news_enabled else "Disabled")
    table.add_row("NewsAPI Key", "✅" if settings.has_newsapi else "⚠️",
                  "Configured" if settings.has_newsapi else "Optional (source skipped)")
    table.add_row("GDELT", "✅" if settings.gdelt_enabled else "⚠️",
                  "Enabled" if settings.gdelt_enabled else "Disabled")
    table.add_row("Time Windows", "ℹ️", ", ".join(settings.time_windows) + ", unlimited")
    table.add_row("Max Articles", "ℹ️", str(settings.max_articles))

    console.print(table)

    if not (settings.google_news_enabled or settings.has_newsapi or settings.gdelt_enabled):
        console.print("\n[red]Error:[/red] No news source is enabled")
        raise typer.Exit(1)


def _display_articles(articles: List[Article]):
    """Display articles as a table."""
    table = Table(title=f"{len(articles)} Articles")
    table.add_column("Published", style="dim", no_wrap=True)
    table.add_column("Source", style="cyan", max_width=20)
    table.add_column("Title", max_width=60)
    table.add_column("Link", style="blue", max_width=40)

    for article in articles:
        table.add_row(
            article.published_at.strftime("%Y-%m-%d %H:%M"),
            article.source,
            article.title,
            article.link,
        )

    console.print(table)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
