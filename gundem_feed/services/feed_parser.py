"""Feed parser service.

This module fetches the Gündem RSS/Atom feed, normalizes each entry through
a per-dialect normalizer and extracts GundemArticle records.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

import feedparser
import httpx
from lxml import etree

from gundem_feed.config import FetchPolicy, ServerConfig, get_config
from gundem_feed.models.schemas import (
    FeedDialect,
    GundemArticle,
    ParsedFeed,
    RawFeedItem,
)
from gundem_feed.services.entities import strip_html
from gundem_feed.services.images import extract_image, fetch_open_graph_image
from gundem_feed.services.urls import extract_slug


logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Karasu Gündem"
PLACEHOLDER_LINK = "https://karasugundem.com"
DEFAULT_AUTHOR = "Karasu Gündem"

# Only this many items per feed may trigger a remote Open Graph lookup
DEFAULT_OG_IMAGE_BUDGET = 5

XML_PREVIEW_LENGTH = 500

# Item children read directly from the payload, in cascade order
ITEM_IMAGE_TAGS = ("image", "featured_image")


class FeedParseError(Exception):
    """Raised when a payload is not a usable RSS or Atom document."""


class FeedCache:
    """In-memory cache of parsed feeds.

    Entries expire ttl seconds after they were stored; set() may override
    the default ttl per entry.
    """

    def __init__(self, ttl: float = 3600):
        self.ttl = ttl
        self._entries: Dict[Hashable, Tuple[float, ParsedFeed]] = {}

    def get(self, key: Hashable) -> Optional[ParsedFeed]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, feed = entry
        if time.monotonic() > expires_at:
            del self._entries[key]
            return None
        return feed

    def set(self, key: Hashable, feed: ParsedFeed, ttl: Optional[float] = None) -> None:
        ttl = self.ttl if ttl is None else ttl
        self._entries[key] = (time.monotonic() + ttl, feed)

    def clear(self) -> None:
        self._entries.clear()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _text(value: Any) -> str:
    """Read a text node that may be a plain string or a feedparser dict."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for key in ("value", "href", "url", "name"):
            if isinstance(value.get(key), str):
                return value[key]
    return ""


def _first_content(entry: Dict[str, Any]) -> str:
    for block in entry.get("content") or []:
        value = _text(block)
        if value:
            return value
    return ""


def _entry_link(entry: Dict[str, Any]) -> str:
    link = _text(entry.get("link")).strip()
    if link:
        return link

    # Try alternate link
    for alternate in entry.get("links") or []:
        if alternate.get("rel", "alternate") == "alternate" and alternate.get("href"):
            return alternate["href"].strip()

    return ""


def _author_name(entry: Dict[str, Any]) -> str:
    # author_detail may also carry href/email, so read name explicitly
    detail = entry.get("author_detail") or {}
    return _text(detail.get("name"))


def _categories(entry: Dict[str, Any]) -> List[str]:
    categories = []
    for tag in entry.get("tags") or []:
        term = tag.get("term") or tag.get("label")
        if term:
            categories.append(str(term).strip())
    return categories


def _media_fields(entry: Dict[str, Any], item: RawFeedItem) -> RawFeedItem:
    item.enclosures = [
        (enclosure.get("href") or enclosure.get("url") or "", enclosure.get("type") or "")
        for enclosure in entry.get("enclosures") or []
    ]
    item.media_content = [
        media["url"] for media in entry.get("media_content") or [] if media.get("url")
    ]
    item.media_thumbnails = [
        thumb["url"] for thumb in entry.get("media_thumbnail") or [] if thumb.get("url")
    ]
    item.image_fields = [
        value
        for value in (_text(entry.get("image")), _text(entry.get("featured_image")))
        if value
    ]
    return item


def _normalize_rss_entry(entry: Dict[str, Any]) -> RawFeedItem:
    """Map an RSS 2.0 <item> to a RawFeedItem.

    <description> arrives as summary, <content:encoded> as content and
    <dc:creator> as author.
    """
    link = _entry_link(entry)
    description = _text(entry.get("summary")) or _text(entry.get("description"))

    item = RawFeedItem(
        title=_text(entry.get("title")),
        link=link,
        description=description,
        content=_first_content(entry) or description,
        pub_date=_text(entry.get("published")) or _text(entry.get("updated")),
        guid=_text(entry.get("id")) or link,
        author=_text(entry.get("author")) or _author_name(entry),
        categories=_categories(entry),
    )
    return _media_fields(entry, item)


def _normalize_atom_entry(entry: Dict[str, Any]) -> RawFeedItem:
    """Map an Atom <entry> to a RawFeedItem."""
    link = _entry_link(entry)
    description = _text(entry.get("summary"))

    item = RawFeedItem(
        title=_text(entry.get("title")),
        link=link,
        description=description,
        content=_first_content(entry) or description,
        pub_date=_text(entry.get("published")) or _text(entry.get("updated")),
        guid=_text(entry.get("id")) or link,
        author=_author_name(entry) or _text(entry.get("author")),
        categories=_categories(entry),
    )
    return _media_fields(entry, item)


_NORMALIZERS: Dict[FeedDialect, Callable[[Dict[str, Any]], RawFeedItem]] = {
    FeedDialect.RSS: _normalize_rss_entry,
    FeedDialect.ATOM: _normalize_atom_entry,
}


def parse_document(xml_text: str) -> Tuple[FeedDialect, Any]:
    """Parse feed XML and detect its dialect.

    Args:
        xml_text: Raw feed payload

    Returns:
        Tuple of (dialect, feedparser result)

    Raises:
        FeedParseError: If the payload is malformed or not RSS/Atom
    """
    document = feedparser.parse(xml_text)

    if document.bozo and not document.entries:
        logger.error(f"XML parse error: {document.get('bozo_exception')}")
        logger.error(f"XML text length: {len(xml_text or '')}")
        logger.error(f"XML preview: {(xml_text or '')[:XML_PREVIEW_LENGTH]}")
        raise FeedParseError(f"Malformed feed: {document.get('bozo_exception')}")

    dialect = FeedDialect.from_version(document.get("version", ""))
    if dialect is None:
        logger.error(f"XML preview: {(xml_text or '')[:XML_PREVIEW_LENGTH]}")
        raise FeedParseError("Invalid RSS feed format")

    return dialect, document


def extract_item_images(xml_text: str, dialect: FeedDialect) -> List[List[str]]:
    """Collect <image> and <featured_image> text per item, in feed order.

    feedparser only reads <image> as the channel logo, so item-level image
    tags are read from the payload here. Tags holding child elements
    instead of a URL are skipped.

    Args:
        xml_text: Raw feed payload
        dialect: Detected feed dialect

    Returns:
        One list of image values per item, or [] if the payload cannot be read
    """
    item_tag = "entry" if dialect is FeedDialect.ATOM else "item"
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)

    try:
        root = etree.fromstring((xml_text or "").encode("utf-8"), parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"Could not read item image tags: {e}")
        return []
    if root is None:
        return []

    images = []
    for element in root.iter():
        if not isinstance(element.tag, str) or etree.QName(element).localname != item_tag:
            continue
        children = [child for child in element if isinstance(child.tag, str)]
        values = []
        for tag in ITEM_IMAGE_TAGS:
            for child in children:
                text = (child.text or "").strip()
                if etree.QName(child).localname == tag and text:
                    values.append(text)
        images.append(values)
    return images


def _channel_fields(channel: Dict[str, Any]) -> Dict[str, str]:
    return {
        "title": _text(channel.get("title")) or PLACEHOLDER_TITLE,
        "description": _text(channel.get("subtitle")) or _text(channel.get("description")),
        "link": _text(channel.get("link")) or PLACEHOLDER_LINK,
        "last_build_date": _text(channel.get("updated"))
        or _text(channel.get("published"))
        or _now_iso(),
    }


def empty_feed() -> ParsedFeed:
    """Placeholder feed returned when the source cannot be read."""
    return ParsedFeed(
        title=PLACEHOLDER_TITLE,
        description="",
        link=PLACEHOLDER_LINK,
        last_build_date=_now_iso(),
        articles=[],
    )


def build_article(item: RawFeedItem, image: Optional[str]) -> GundemArticle:
    """Clean a RawFeedItem into a GundemArticle."""
    description = strip_html(item.description)
    content = strip_html(item.content) or description

    return GundemArticle(
        title=strip_html(item.title),
        link=item.link,
        description=description,
        content=content,
        pub_date=item.pub_date.strip() or _now_iso(),
        guid=item.guid or item.link,
        author=item.author.strip() or DEFAULT_AUTHOR,
        category=tuple(item.categories),
        image=image,
        slug=extract_slug(item.link),
    )


async def _extract_article(
    entry: Dict[str, Any],
    normalize: Callable[[Dict[str, Any]], RawFeedItem],
    client: httpx.AsyncClient,
    allow_remote_image: bool,
    item_images: List[str],
) -> GundemArticle:
    item = normalize(entry)
    if item_images:
        item.image_fields = list(dict.fromkeys(item_images + item.image_fields))

    image = extract_image(item)
    if not image and item.link and allow_remote_image:
        image = await fetch_open_graph_image(client, item.link)

    return build_article(item, image)


async def _build_feed(
    dialect: FeedDialect,
    document: Any,
    client: httpx.AsyncClient,
    og_image_budget: int,
    item_images: Optional[List[List[str]]] = None,
) -> ParsedFeed:
    channel = _channel_fields(document.feed)
    entries = list(document.entries)

    if not entries:
        logger.warning("No items found in RSS feed")
        return ParsedFeed(**channel)

    if item_images is None or len(item_images) != len(entries):
        if item_images:
            logger.warning(
                f"Found {len(item_images)} item image lists for {len(entries)} entries; ignoring them"
            )
        item_images = [[] for _ in entries]

    normalize = _NORMALIZERS[dialect]
    results = await asyncio.gather(
        *(
            _extract_article(entry, normalize, client, index < og_image_budget, images)
            for index, (entry, images) in enumerate(zip(entries, item_images))
        ),
        return_exceptions=True,
    )

    articles = []
    failed = 0
    for entry, result in zip(entries, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, Exception):
            failed += 1
            logger.error(f"Skipping feed item {_text(entry.get('link'))!r}: {result}")
            continue
        articles.append(result)

    logger.info(f"Parsed {len(articles)} articles from {dialect.value} feed")
    return ParsedFeed(articles=articles, failed_items=failed, **channel)


def feed_cache_key(rss_url: str, og_image_budget: int) -> Tuple[str, int]:
    """Cache key for a parsed feed; the image budget changes the result."""
    return rss_url, og_image_budget


async def parse_gundem_rss(
    rss_url: str,
    policy: Optional[FetchPolicy] = None,
    cache: Optional[FeedCache] = None,
    og_image_budget: int = DEFAULT_OG_IMAGE_BUDGET,
) -> ParsedFeed:
    """Fetch and parse the Gündem feed.

    Never raises: network, HTTP and XML failures are logged and yield an
    empty feed with placeholder channel metadata.

    Args:
        rss_url: URL of the RSS/Atom feed
        policy: Request and cache settings (defaults to FetchPolicy())
        cache: Optional cache of previously parsed feeds; successful parses
            are kept for policy.cache_ttl seconds
        og_image_budget: Number of leading items allowed a remote image lookup

    Returns:
        ParsedFeed with articles in feed order
    """
    if policy is None:
        policy = FetchPolicy()

    cache_key = feed_cache_key(rss_url, og_image_budget)
    if cache is not None:
        cached = cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Using cached feed for {rss_url}")
            return cached

    logger.info(f"Parsing feed: {rss_url}")

    try:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=policy.timeout,
            headers=policy.headers,
        ) as client:
            response = await client.get(rss_url)
            response.raise_for_status()

            dialect, document = parse_document(response.text)
            item_images = extract_item_images(response.text, dialect)
            feed = await _build_feed(dialect, document, client, og_image_budget, item_images)
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch feed {rss_url}: {e}")
        return empty_feed()
    except FeedParseError as e:
        logger.error(f"Failed to parse feed {rss_url}: {e}")
        return empty_feed()
    except Exception:
        logger.exception(f"Unexpected error while parsing feed {rss_url}")
        return empty_feed()

    if cache is not None:
        cache.set(cache_key, feed, ttl=policy.cache_ttl)

    return feed


async def get_latest_gundem_articles(
    limit: int = 10,
    config: Optional[ServerConfig] = None,
    cache: Optional[FeedCache] = None,
) -> List[GundemArticle]:
    """Get the latest articles from the configured Gündem feed.

    Args:
        limit: Maximum number of articles to return
        config: Optional configuration (uses the process config if not provided)
        cache: Optional feed cache

    Returns:
        Up to `limit` articles in feed order
    """
    if config is None:
        config = get_config()

    feed = await parse_gundem_rss(
        config.feed_url,
        policy=FetchPolicy.from_config(config),
        cache=cache,
        og_image_budget=config.og_image_budget,
    )
    return feed.articles[:limit]
