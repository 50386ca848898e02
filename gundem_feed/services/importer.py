"""Import of real-estate news into the news_articles table.

Fetches the latest Gündem articles, keeps the real-estate related ones,
rewrites them with a real estate angle and upserts them by slug as drafts.
Writes are spaced out by a fixed delay.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from gundem_feed.config import ServerConfig, get_config
from gundem_feed.models.schemas import EnrichedArticle, ImportSummary, RewrittenArticle
from gundem_feed.services.enrichment import FIXED_SEO_KEYWORDS, enhance_article_seo
from gundem_feed.services.feed_parser import FeedCache, get_latest_gundem_articles
from gundem_feed.services.rewriter import rewrite_for_real_estate
from gundem_feed.services.urls import slugify
from gundem_feed.storage import database


logger = logging.getLogger(__name__)

SEO_DESCRIPTION_LENGTH = 150


def build_news_row(
    enriched: EnrichedArticle,
    rewritten: RewrittenArticle,
    source_domain: str,
) -> Dict[str, Any]:
    """Build the news_articles column values for a rewritten article.

    Rows are created as unpublished drafts awaiting review.
    """
    article = enriched.article
    slug = article.slug if article.slug != "article" else slugify(article.title)

    seo_keywords = list(dict.fromkeys(FIXED_SEO_KEYWORDS + list(rewritten.related_neighborhoods)))

    return {
        "title": rewritten.title,
        "slug": slug,
        "source_url": article.link,
        "source_domain": source_domain,
        "original_summary": article.description or article.content or "",
        "content": rewritten.content,
        "emlak_analysis": rewritten.emlak_analysis,
        "emlak_analysis_generated": True,
        "related_neighborhoods": list(rewritten.related_neighborhoods),
        "related_listings": [],
        "seo_title": rewritten.title,
        "seo_description": f"{rewritten.emlak_analysis[:SEO_DESCRIPTION_LENGTH]}...",
        "seo_keywords": seo_keywords,
        "published": False,
        "featured": False,
        "published_at": None,
    }


async def import_gundem_news(
    limit: Optional[int] = None,
    config: Optional[ServerConfig] = None,
    delay: Optional[float] = None,
    cache: Optional[FeedCache] = None,
) -> ImportSummary:
    """Fetch, classify, rewrite and store the latest Gündem news.

    Args:
        limit: Number of feed articles to consider (default: config.import_limit)
        config: Optional configuration (uses the process config if not provided)
        delay: Seconds to wait between database writes (default: config.import_delay)
        cache: Optional feed cache

    Returns:
        ImportSummary with created/updated/failed counts
    """
    if config is None:
        config = get_config()
    if limit is None:
        limit = config.import_limit
    if delay is None:
        delay = config.import_delay

    summary = ImportSummary()

    articles = await get_latest_gundem_articles(limit, config=config, cache=cache)
    summary.fetched = len(articles)
    logger.info(f"Fetched {len(articles)} articles from Karasu Gündem")

    enriched_articles = [enhance_article_seo(a, config.site_url) for a in articles]
    relevant = [e for e in enriched_articles if e.is_real_estate_related]
    summary.relevant = len(relevant)
    logger.info(f"Found {len(relevant)} real estate related articles")

    for index, enriched in enumerate(relevant):
        if index > 0 and delay > 0:
            await asyncio.sleep(delay)

        try:
            rewritten = rewrite_for_real_estate(enriched)
            row = build_news_row(enriched, rewritten, config.source_domain)
            record, created = await database.upsert_news_article(row)
        except Exception as e:
            logger.error(f"Error processing article {enriched.article.link}: {e}")
            summary.failed += 1
            summary.errors.append(f"{enriched.article.link}: {e}")
            continue

        if created:
            summary.created += 1
            logger.info(f"Created: {record.title[:50]}")
        else:
            summary.updated += 1
            logger.info(f"Updated: {record.title[:50]}")

    logger.info(
        f"Import completed: created={summary.created}, updated={summary.updated}, "
        f"failed={summary.failed}, relevant={summary.relevant}"
    )
    return summary
