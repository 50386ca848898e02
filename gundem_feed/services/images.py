"""Article image resolution.

Images are looked up in the feed item first, cheapest source first. The
remote Open Graph lookup is a separate step the parser only runs for a
limited number of items per feed.
"""

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from gundem_feed.models.schemas import RawFeedItem
from gundem_feed.services.urls import resolve_image_url


logger = logging.getLogger(__name__)

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
_BARE_IMAGE_URL = re.compile(
    r"(https?://[^\s<>\"']+\.(?:jpg|jpeg|png|webp|gif|svg))",
    re.IGNORECASE,
)
_LARGE_DIMENSION = re.compile(r"^\d{3,}$")


def _first_img_src(html: str) -> Optional[str]:
    if not html or "<img" not in html.lower():
        return None
    img = BeautifulSoup(html, "lxml").find("img", src=True)
    if img is None:
        return None
    src = img.get("src", "").strip()
    return src or None


def extract_image(item: RawFeedItem) -> Optional[str]:
    """Pick an image URL from the data carried by the feed item itself.

    Order: image enclosure, media:content, media:thumbnail, explicit
    image/featured_image field, first <img> in content or description,
    bare image URL in content or description.

    Args:
        item: Normalized feed item (content/description still hold raw HTML)

    Returns:
        Image URL, or None if no strategy matched
    """
    for url, mime_type in item.enclosures:
        if url and (mime_type or "").lower().startswith("image/"):
            return url

    for url in item.media_content:
        if url:
            return url

    for url in item.media_thumbnails:
        if url:
            return url

    for value in item.image_fields:
        if value and _ABSOLUTE_URL.match(value):
            return value

    src = _first_img_src(item.content) or _first_img_src(item.description)
    if src:
        return resolve_image_url(src, item.link)

    for text in (item.content, item.description):
        match = _BARE_IMAGE_URL.search(text or "")
        if match:
            return match.group(1)

    return None


def _meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: key})
        if tag is not None:
            content = (tag.get("content") or "").strip()
            if content:
                return content
    return None


async def fetch_open_graph_image(
    client: httpx.AsyncClient, article_url: str
) -> Optional[str]:
    """Fetch an article page and look for a representative image.

    Tries og:image, then twitter:image, then the first <img> with a width or
    height of at least three digits.

    Args:
        client: HTTP client used for the request
        article_url: URL of the article page

    Returns:
        Image URL, or None if the page is unavailable or has no match
    """
    try:
        response = await client.get(article_url)
        if response.status_code >= 400:
            return None
        html = response.text
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Failed to fetch OG image for {article_url}: {e}")
        return None

    soup = BeautifulSoup(html, "lxml")

    image = _meta_content(soup, "og:image") or _meta_content(soup, "twitter:image")
    if image:
        return image

    for img in soup.find_all("img", src=True):
        width = str(img.get("width", "")).strip()
        height = str(img.get("height", "")).strip()
        if _LARGE_DIMENSION.match(width) or _LARGE_DIMENSION.match(height):
            return img["src"]

    return None
