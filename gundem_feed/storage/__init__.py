"""Storage layer for gundem_feed."""

from .database import (
    get_database,
    init_database,
    close_database,
    get_news_article_by_slug,
    upsert_news_article,
    list_news_articles,
    set_published,
)

__all__ = [
    "get_database",
    "init_database",
    "close_database",
    "get_news_article_by_slug",
    "upsert_news_article",
    "list_news_articles",
    "set_published",
]
