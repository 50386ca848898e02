"""Command line interface for gundem_feed.

    gundem-feed fetch --limit 5 --real-estate-only
    gundem-feed import --limit 20 --delay 0.5
"""

import asyncio
import json
import sys
from dataclasses import asdict
from typing import Optional

import click

from gundem_feed.config import get_config
from gundem_feed.logging_config import setup_logging
from gundem_feed.services.enrichment import enhance_article_seo
from gundem_feed.services.feed_parser import get_latest_gundem_articles
from gundem_feed.services.importer import import_gundem_news
from gundem_feed.storage.database import close_database


@click.group()
def cli() -> None:
    """Karasu Gündem news ingestion."""
    setup_logging(get_config())


@cli.command()
@click.option("--limit", default=10, show_default=True, help="Maximum number of articles")
@click.option("--real-estate-only", is_flag=True, help="Only print real estate related articles")
def fetch(limit: int, real_estate_only: bool) -> None:
    """Fetch the feed and print enriched articles as JSON."""
    config = get_config()

    articles = asyncio.run(get_latest_gundem_articles(limit, config=config))
    enriched = [enhance_article_seo(a, config.site_url) for a in articles]
    if real_estate_only:
        enriched = [e for e in enriched if e.is_real_estate_related]

    click.echo(json.dumps([asdict(e) for e in enriched], ensure_ascii=False, indent=2))


@cli.command(name="import")
@click.option("--limit", type=int, default=None, help="Number of feed articles to consider")
@click.option("--delay", type=float, default=None, help="Seconds to wait between database writes")
def import_command(limit: Optional[int], delay: Optional[float]) -> None:
    """Import real estate related news into the database as drafts."""

    async def run_import():
        try:
            return await import_gundem_news(limit=limit, delay=delay)
        finally:
            await close_database()

    summary = asyncio.run(run_import())
    click.echo(json.dumps(asdict(summary), ensure_ascii=False, indent=2))

    if summary.failed:
        sys.exit(1)


if __name__ == "__main__":
    cli()
