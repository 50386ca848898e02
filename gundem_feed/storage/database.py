"""Database storage for gundem_feed.

This module provides async SQLite operations for the news_articles table.
Articles are keyed by slug: writing a slug that already exists updates the
row in place.
Database location: ~/.gundem_feed/gundem_feed.db (or GUNDEM_FEED_DB_PATH env var)
"""

import json
import os
import aiosqlite
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from gundem_feed.models.schemas import NewsArticleRecord


JSON_COLUMNS = ("related_neighborhoods", "related_listings", "seo_keywords")
BOOLEAN_COLUMNS = ("emlak_analysis_generated", "published", "featured")
WRITABLE_COLUMNS = (
    "title",
    "source_url",
    "source_domain",
    "original_summary",
    "content",
    "emlak_analysis",
    "emlak_analysis_generated",
    "related_neighborhoods",
    "related_listings",
    "seo_title",
    "seo_description",
    "seo_keywords",
    "published",
    "featured",
    "published_at",
)


def _get_db_path() -> Path:
    """Get the database path, respecting GUNDEM_FEED_DB_PATH env var for testing."""
    env_path = os.environ.get("GUNDEM_FEED_DB_PATH")
    if env_path:
        return Path(env_path)
    return Path.home() / ".gundem_feed" / "gundem_feed.db"


# Singleton connection
_db_connection: Optional[aiosqlite.Connection] = None


async def get_database() -> aiosqlite.Connection:
    """Get or create a singleton database connection.

    Returns:
        Active database connection
    """
    global _db_connection

    if _db_connection is None:
        db_path = _get_db_path()
        # Ensure directory exists
        db_path.parent.mkdir(parents=True, exist_ok=True)

        _db_connection = await aiosqlite.connect(db_path)
        _db_connection.row_factory = aiosqlite.Row
        await init_database(_db_connection)

    return _db_connection


async def init_database(db: Optional[aiosqlite.Connection] = None) -> None:
    """Initialize database tables if they don't exist.

    Args:
        db: Optional database connection (uses singleton if not provided)
    """
    if db is None:
        db = await get_database()

    await db.execute("""
        CREATE TABLE IF NOT EXISTS news_articles (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            source_url TEXT NOT NULL,
            source_domain TEXT NOT NULL,
            original_summary TEXT NOT NULL DEFAULT '',
            content TEXT NOT NULL DEFAULT '',
            emlak_analysis TEXT NOT NULL DEFAULT '',
            emlak_analysis_generated BOOLEAN DEFAULT FALSE,
            related_neighborhoods TEXT NOT NULL DEFAULT '[]',
            related_listings TEXT NOT NULL DEFAULT '[]',
            seo_title TEXT NOT NULL DEFAULT '',
            seo_description TEXT NOT NULL DEFAULT '',
            seo_keywords TEXT NOT NULL DEFAULT '[]',
            published BOOLEAN DEFAULT FALSE,
            featured BOOLEAN DEFAULT FALSE,
            published_at TIMESTAMP,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL
        )
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_news_articles_published ON news_articles(published)
    """)

    await db.commit()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_record(row: aiosqlite.Row) -> NewsArticleRecord:
    return NewsArticleRecord(
        id=row["id"],
        title=row["title"],
        slug=row["slug"],
        source_url=row["source_url"],
        source_domain=row["source_domain"],
        original_summary=row["original_summary"],
        content=row["content"],
        emlak_analysis=row["emlak_analysis"],
        emlak_analysis_generated=bool(row["emlak_analysis_generated"]),
        related_neighborhoods=json.loads(row["related_neighborhoods"] or "[]"),
        related_listings=json.loads(row["related_listings"] or "[]"),
        seo_title=row["seo_title"],
        seo_description=row["seo_description"],
        seo_keywords=json.loads(row["seo_keywords"] or "[]"),
        published=bool(row["published"]),
        featured=bool(row["featured"]),
        published_at=_parse_timestamp(row["published_at"]),
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


def _column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for column in WRITABLE_COLUMNS:
        if column not in data:
            continue
        value = data[column]
        if column in JSON_COLUMNS:
            value = json.dumps(list(value or []), ensure_ascii=False)
        elif column in BOOLEAN_COLUMNS:
            value = bool(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        values[column] = value
    return values


async def get_news_article_by_slug(slug: str) -> Optional[NewsArticleRecord]:
    """Get a news article by its slug.

    Args:
        slug: Natural key of the article

    Returns:
        NewsArticleRecord if found, None otherwise
    """
    db = await get_database()

    cursor = await db.execute("SELECT * FROM news_articles WHERE slug = ?", (slug,))
    row = await cursor.fetchone()

    if row is None:
        return None

    return _row_to_record(row)


async def upsert_news_article(data: Dict[str, Any]) -> Tuple[NewsArticleRecord, bool]:
    """Insert a news article, or update the existing row with the same slug.

    Args:
        data: Column values; must include slug, title, source_url and source_domain

    Returns:
        Tuple of (stored record, created) where created is False for updates

    Raises:
        ValueError: If a required column is missing
    """
    slug = data.get("slug")
    for required in ("slug", "title", "source_url", "source_domain"):
        if not data.get(required):
            raise ValueError(f"News article is missing required field '{required}'")

    db = await get_database()
    values = _column_values(data)
    now = _now()

    cursor = await db.execute("SELECT id FROM news_articles WHERE slug = ?", (slug,))
    existing = await cursor.fetchone()

    if existing is not None:
        assignments = ", ".join(f"{column} = ?" for column in values)
        await db.execute(
            f"UPDATE news_articles SET {assignments}, updated_at = ? WHERE id = ?",
            list(values.values()) + [now, existing["id"]],
        )
        created = False
    else:
        columns = list(values) + ["slug", "created_at", "updated_at"]
        placeholders = ",".join("?" * len(columns))
        try:
            await db.execute(
                f"INSERT INTO news_articles ({', '.join(columns)}) VALUES ({placeholders})",
                list(values.values()) + [slug, now, now],
            )
        except aiosqlite.IntegrityError as e:
            raise ValueError(f"News article with slug '{slug}' could not be stored") from e
        created = True

    await db.commit()

    record = await get_news_article_by_slug(slug)
    return record, created


async def list_news_articles(
    published_only: bool = False,
    limit: int = 50,
) -> List[NewsArticleRecord]:
    """List news articles, newest first.

    Args:
        published_only: Only return published articles (default: False, drafts included)
        limit: Maximum number of articles to return (default: 50)

    Returns:
        List of NewsArticleRecord objects ordered by creation time (newest first)
    """
    db = await get_database()

    query = "SELECT * FROM news_articles"
    params: List = []

    if published_only:
        query += " WHERE published = 1"

    query += " ORDER BY created_at DESC, id DESC LIMIT ?"
    params.append(limit)

    cursor = await db.execute(query, params)

    articles = []
    async for row in cursor:
        articles.append(_row_to_record(row))

    return articles


async def set_published(slug: str, published: bool = True) -> Optional[NewsArticleRecord]:
    """Publish or unpublish a news article.

    Publishing stamps published_at the first time; unpublishing clears it.

    Args:
        slug: Slug of the article
        published: Target state

    Returns:
        Updated NewsArticleRecord if found, None otherwise
    """
    db = await get_database()
    now = _now()

    if published:
        await db.execute(
            """
            UPDATE news_articles
            SET published = 1, published_at = COALESCE(published_at, ?), updated_at = ?
            WHERE slug = ?
            """,
            (now, now, slug),
        )
    else:
        await db.execute(
            """
            UPDATE news_articles
            SET published = 0, published_at = NULL, updated_at = ?
            WHERE slug = ?
            """,
            (now, slug),
        )
    await db.commit()

    return await get_news_article_by_slug(slug)


async def close_database() -> None:
    """Close the database connection."""
    global _db_connection

    if _db_connection is not None:
        await _db_connection.close()
        _db_connection = None
