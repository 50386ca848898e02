"""Real-estate classification and SEO enrichment.

Classification is a plain substring match over the lowercased article text,
so a keyword embedded in a longer unrelated word also matches.
"""

from typing import List

from gundem_feed.models.schemas import (
    EnrichedArticle,
    GundemArticle,
    HreflangLink,
    InternalLink,
)
from gundem_feed.services.urls import slugify, turkish_lower, url_host


REAL_ESTATE_KEYWORDS = [
    "emlak",
    "gayrimenkul",
    "satılık",
    "kiralık",
    "konut",
    "daire",
    "villa",
    "arsa",
    "tarla",
    "tapu",
    "imar",
    "inşaat",
    "yapı",
    "proje",
    "yatırım",
    "kira",
    "müstakil",
    "yazlık",
    "rezidans",
    "metrekare",
    "dükkan",
    "işyeri",
    "kentsel dönüşüm",
    "toki",
    "ev fiyat",
]

NEIGHBORHOOD_KEYWORDS = [
    "karasu",
    "kocaali",
    "merkez",
    "sahil",
    "yalı",
    "liman",
    "aziziye",
    "inköy",
    "kılıç",
    "çamlıca",
    "çamlık",
    "yenimahalle",
    "çataltepe",
    "bota",
    "kurtuluş",
    "cumhuriyet",
    "kuzuluk",
    "adatepe",
    "tuzla",
    "denizköy",
]

FIXED_SEO_KEYWORDS = ["karasu emlak", "karasu haberleri"]

NEWS_PATH_PREFIX = "/haberler"
NEIGHBORHOOD_PATH_PREFIX = "/karasu"


def _searchable_text(article: GundemArticle) -> str:
    return turkish_lower(
        " ".join([article.title or "", article.description or "", article.content or ""])
    )


def is_real_estate_related(article: GundemArticle) -> bool:
    """True if the article text mentions any real-estate keyword."""
    text = _searchable_text(article)
    return any(keyword in text for keyword in REAL_ESTATE_KEYWORDS)


def extract_neighborhoods(article: GundemArticle) -> List[str]:
    """Neighborhood keywords mentioned in the article, in keyword-list order."""
    text = _searchable_text(article)
    matches = []
    for keyword in NEIGHBORHOOD_KEYWORDS:
        if keyword in text and keyword not in matches:
            matches.append(keyword)
    return matches


def canonical_url(article: GundemArticle, site_url: str) -> str:
    """The article link if it is already on the site, else a site news URL."""
    site_url = site_url.rstrip("/")
    if article.link and url_host(article.link) == url_host(site_url):
        return article.link
    return f"{site_url}{NEWS_PATH_PREFIX}/{article.slug}"


def enhance_article_seo(article: GundemArticle, site_url: str) -> EnrichedArticle:
    """Attach classification and SEO metadata to a parsed article.

    Args:
        article: Parsed article
        site_url: Base URL of the site the article is republished on

    Returns:
        EnrichedArticle wrapping the unchanged article
    """
    neighborhoods = extract_neighborhoods(article)

    internal_links = tuple(
        InternalLink(
            text=f"{neighborhood.capitalize()} emlak ilanları",
            href=f"{NEIGHBORHOOD_PATH_PREFIX}/{slugify(neighborhood)}",
            type="neighborhood",
        )
        for neighborhood in neighborhoods
    )

    seo_keywords: List[str] = []
    for keyword in neighborhoods + FIXED_SEO_KEYWORDS:
        if keyword not in seo_keywords:
            seo_keywords.append(keyword)

    return EnrichedArticle(
        article=article,
        is_real_estate_related=is_real_estate_related(article),
        related_neighborhoods=tuple(neighborhoods),
        canonical_url=canonical_url(article, site_url),
        hreflang_links=(
            HreflangLink(lang="tr", url=article.link),
            HreflangLink(lang="x-default", url=article.link),
        ),
        internal_links=internal_links,
        seo_keywords=tuple(seo_keywords),
    )
