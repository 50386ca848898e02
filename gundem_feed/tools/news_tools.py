"""Gündem news MCP tools.

This module provides MCP tools for reading the Gündem feed and managing the
imported news_articles rows.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings and 0 for optional integers.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict

from mcp.server.fastmcp import Context

from gundem_feed.config import get_config
from gundem_feed.models.schemas import EnrichedArticle, NewsArticleRecord
from gundem_feed.services.enrichment import enhance_article_seo
from gundem_feed.services.feed_parser import FeedCache, get_latest_gundem_articles
from gundem_feed.services.importer import import_gundem_news as run_import
from gundem_feed.storage import database


logger = logging.getLogger(__name__)

# Shared by all tool calls in this process; entries expire after config.cache_ttl
feed_cache = FeedCache(ttl=get_config().cache_ttl)


def _enriched_to_dict(enriched: EnrichedArticle) -> Dict[str, Any]:
    article = enriched.article
    return {
        "title": article.title,
        "link": article.link,
        "slug": article.slug,
        "description": article.description,
        "pub_date": article.pub_date,
        "author": article.author,
        "category": list(article.category),
        "image": article.image,
        "is_real_estate_related": enriched.is_real_estate_related,
        "related_neighborhoods": list(enriched.related_neighborhoods),
        "canonical_url": enriched.canonical_url,
        "hreflang_links": [asdict(link) for link in enriched.hreflang_links],
        "internal_links": [asdict(link) for link in enriched.internal_links],
        "seo_keywords": list(enriched.seo_keywords),
    }


def _record_to_dict(record: NewsArticleRecord, include_content: bool = False) -> Dict[str, Any]:
    data = {
        "id": record.id,
        "title": record.title,
        "slug": record.slug,
        "source_url": record.source_url,
        "source_domain": record.source_domain,
        "related_neighborhoods": record.related_neighborhoods,
        "seo_keywords": record.seo_keywords,
        "published": record.published,
        "featured": record.featured,
        "published_at": record.published_at.isoformat() if record.published_at else None,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
    if include_content:
        data.update({
            "original_summary": record.original_summary,
            "content": record.content,
            "emlak_analysis": record.emlak_analysis,
            "seo_title": record.seo_title,
            "seo_description": record.seo_description,
        })
    return data


async def get_gundem_articles(
    limit: int = 10,
    real_estate_only: bool = False,
    ctx: Context = None,
) -> Dict[str, Any]:
    """Fetch the latest Karasu Gündem articles with real estate enrichment.

    Parses the configured RSS/Atom feed (cached for one hour), then tags each
    article with real estate relevance, neighborhood mentions, canonical and
    hreflang URLs and internal link suggestions. An unreachable feed yields
    an empty list, not an error.

    Args:
        limit: Maximum number of articles to return (default: 10)
        real_estate_only: Only return articles classified as real estate related
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of articles returned
        - articles: list of enriched article objects
    """
    logger.info(f"get_gundem_articles called: limit={limit}, real_estate_only={real_estate_only}")

    config = get_config()
    articles = await get_latest_gundem_articles(limit, config=config, cache=feed_cache)
    enriched = [enhance_article_seo(a, config.site_url) for a in articles]

    if real_estate_only:
        enriched = [e for e in enriched if e.is_real_estate_related]

    return {
        "success": True,
        "count": len(enriched),
        "articles": [_enriched_to_dict(e) for e in enriched],
    }


async def import_gundem_news(
    limit: int = 0,
    ctx: Context = None,
) -> Dict[str, Any]:
    """Import real estate related Gündem news into the news database.

    Fetches the latest feed articles, keeps the real estate related ones,
    rewrites them with a real estate analysis and stores them as unpublished
    drafts. Articles are keyed by slug, so re-importing updates existing rows
    instead of duplicating them.

    Args:
        limit: Number of feed articles to consider (0 uses the configured default)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - fetched, relevant, created, updated, failed: counts
        - errors: list of per-article error strings
    """
    logger.info(f"import_gundem_news called: limit={limit}")

    summary = await run_import(limit=limit or None, cache=feed_cache)

    return {
        "success": True,
        **asdict(summary),
    }


async def list_news_articles(
    published_only: bool = False,
    limit: int = 50,
    ctx: Context = None,
) -> Dict[str, Any]:
    """List imported news articles, newest first.

    Args:
        published_only: Only include published articles (default: False, drafts included)
        limit: Maximum number of articles to return (default: 50)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of articles returned
        - articles: list of article summaries
    """
    logger.info(f"list_news_articles called: published_only={published_only}, limit={limit}")

    records = await database.list_news_articles(published_only=published_only, limit=limit)

    return {
        "success": True,
        "count": len(records),
        "articles": [_record_to_dict(r) for r in records],
    }


async def get_news_article(slug: str, ctx: Context = None) -> Dict[str, Any]:
    """Get one imported news article with its full content and analysis.

    Args:
        slug: Slug of the article (from list_news_articles response)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - article: full article object (if found)
        - error: string if article not found
    """
    logger.info(f"get_news_article called: slug={slug}")

    record = await database.get_news_article_by_slug(slug)

    if record is None:
        return {
            "success": False,
            "error": f"News article '{slug}' not found",
        }

    return {
        "success": True,
        "article": _record_to_dict(record, include_content=True),
    }


async def publish_news_article(
    slug: str,
    published: bool = True,
    ctx: Context = None,
) -> Dict[str, Any]:
    """Publish or unpublish an imported news article.

    Imported articles start as drafts; publishing makes them visible and sets
    published_at the first time.

    Args:
        slug: Slug of the article
        published: True to publish, False to revert to draft
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - article: updated article summary (if found)
        - error: string if article not found
    """
    logger.info(f"publish_news_article called: slug={slug}, published={published}")

    record = await database.set_published(slug, published)

    if record is None:
        return {
            "success": False,
            "error": f"News article '{slug}' not found",
        }

    return {
        "success": True,
        "article": _record_to_dict(record),
    }


# List of news tools for registration
news_tools = [
    get_gundem_articles,
    import_gundem_news,
    list_news_articles,
    get_news_article,
    publish_news_article,
]
