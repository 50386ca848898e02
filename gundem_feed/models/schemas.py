"""Data models for gundem_feed.

This module defines the records that flow through the ingestion pipeline:
raw feed items, parsed articles, their enriched projections and the rows
persisted to the news_articles table.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class FeedDialect(Enum):
    """Structural variant of a feed document."""

    RSS = "rss"
    ATOM = "atom"

    @classmethod
    def from_version(cls, version: str) -> Optional["FeedDialect"]:
        """Map a feedparser version string (e.g. "rss20", "atom10") to a dialect."""
        version = (version or "").lower()
        if version.startswith("atom"):
            return cls.ATOM
        if version.startswith("rss"):
            return cls.RSS
        return None


@dataclass
class RawFeedItem:
    """One feed entry after dialect normalization, before cleaning."""

    title: str = ""
    link: str = ""
    description: str = ""
    content: str = ""
    pub_date: str = ""
    guid: str = ""
    author: str = ""
    categories: List[str] = field(default_factory=list)
    enclosures: List[Tuple[str, str]] = field(default_factory=list)
    media_content: List[str] = field(default_factory=list)
    media_thumbnails: List[str] = field(default_factory=list)
    image_fields: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GundemArticle:
    """Represents a parsed article from the Gündem feed."""

    title: str
    link: str
    description: str
    content: str
    pub_date: str
    guid: str
    author: str
    category: Tuple[str, ...]
    image: Optional[str]
    slug: str


@dataclass
class ParsedFeed:
    """Channel metadata plus the articles extracted from it."""

    title: str
    description: str
    link: str
    last_build_date: str
    articles: List[GundemArticle] = field(default_factory=list)
    failed_items: int = 0


@dataclass(frozen=True)
class HreflangLink:
    lang: str
    url: str


@dataclass(frozen=True)
class InternalLink:
    text: str
    href: str
    type: str


@dataclass(frozen=True)
class EnrichedArticle:
    """A GundemArticle plus real-estate classification and SEO metadata."""

    article: GundemArticle
    is_real_estate_related: bool
    related_neighborhoods: Tuple[str, ...]
    canonical_url: str
    hreflang_links: Tuple[HreflangLink, ...]
    internal_links: Tuple[InternalLink, ...]
    seo_keywords: Tuple[str, ...]


@dataclass(frozen=True)
class RewrittenArticle:
    """An article rewritten with a real estate angle."""

    title: str
    content: str
    emlak_analysis: str
    related_neighborhoods: Tuple[str, ...]
    internal_links: Tuple[str, ...]


@dataclass
class NewsArticleRecord:
    """Represents a row of the news_articles table."""

    id: int
    title: str
    slug: str
    source_url: str
    source_domain: str
    original_summary: str
    content: str
    emlak_analysis: str
    emlak_analysis_generated: bool
    related_neighborhoods: List[str]
    related_listings: List[str]
    seo_title: str
    seo_description: str
    seo_keywords: List[str]
    published: bool
    featured: bool
    published_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


@dataclass
class ImportSummary:
    """Outcome of one import run."""

    fetched: int = 0
    relevant: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
