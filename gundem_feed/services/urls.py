"""Slug and URL helpers."""

import re
from typing import Optional
from urllib.parse import ParseResult, urlparse


_TURKISH_ASCII = str.maketrans({
    "ç": "c", "Ç": "c",
    "ğ": "g", "Ğ": "g",
    "ı": "i", "I": "i", "İ": "i",
    "ö": "o", "Ö": "o",
    "ş": "s", "Ş": "s",
    "ü": "u", "Ü": "u",
})


def _parse_absolute(url: str) -> Optional[ParseResult]:
    """Parse an absolute URL; None if it is relative or malformed."""
    try:
        parsed = urlparse(url or "")
    except ValueError:
        # e.g. an unbalanced "[" in the host
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed


def extract_slug(url: str) -> str:
    """Derive a slug from the last non-empty path segment of a URL.

    Links that do not parse as absolute URLs are split on "/" instead.

    Args:
        url: Article link

    Returns:
        The slug, or "article" if the URL has no usable segment
    """
    parsed = _parse_absolute(url)
    if parsed is not None:
        parts = [part for part in parsed.path.split("/") if part]
        return parts[-1] if parts else "article"

    parts = [part for part in (url or "").split("/") if part]
    return parts[-1] if parts else "article"


def turkish_lower(text: str) -> str:
    # str.lower() turns "İ" into "i" + combining dot, which breaks substring matches
    return (text or "").replace("İ", "i").lower()


def slugify(text: str) -> str:
    """ASCII slug for Turkish text: "Yalı Mahallesi" -> "yali-mahallesi"."""
    ascii_text = (text or "").translate(_TURKISH_ASCII).lower()
    return re.sub(r"[^a-z0-9]+", "-", ascii_text).strip("-")


def url_origin(url: str) -> Optional[str]:
    """Return "scheme://host" for an absolute URL, None otherwise."""
    parsed = _parse_absolute(url)
    if parsed is None:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def url_host(url: str) -> str:
    """Lowercased host without "www."; empty for relative or malformed URLs."""
    parsed = _parse_absolute(url)
    if parsed is None:
        return ""
    host = parsed.netloc.lower()
    return host[4:] if host.startswith("www.") else host


def resolve_image_url(image_url: str, article_link: str) -> str:
    """Make a protocol-relative or root-relative image URL absolute.

    Other relative forms are returned unchanged.
    """
    if image_url.startswith("//"):
        return f"https:{image_url}"
    if image_url.startswith("/"):
        origin = url_origin(article_link)
        if origin:
            return f"{origin}{image_url}"
    return image_url
