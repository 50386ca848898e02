"""Services for gundem_feed."""

from .entities import decode_html_entities, strip_html
from .enrichment import enhance_article_seo, extract_neighborhoods, is_real_estate_related
from .feed_parser import (
    FeedCache,
    FeedParseError,
    get_latest_gundem_articles,
    parse_gundem_rss,
)
from .images import extract_image, fetch_open_graph_image
from .importer import import_gundem_news
from .rewriter import rewrite_for_real_estate
from .urls import extract_slug

__all__ = [
    "decode_html_entities",
    "strip_html",
    "enhance_article_seo",
    "extract_neighborhoods",
    "is_real_estate_related",
    "FeedCache",
    "FeedParseError",
    "get_latest_gundem_articles",
    "parse_gundem_rss",
    "extract_image",
    "fetch_open_graph_image",
    "import_gundem_news",
    "rewrite_for_real_estate",
    "extract_slug",
]
