"""Template-based rewriting of news with a real estate angle.

Adds a "Bu ne anlama geliyor?" analysis paragraph, a closing paragraph on
the local property market and a list of internal site links.
"""

from typing import Iterable, List

from gundem_feed.models.schemas import EnrichedArticle, RewrittenArticle
from gundem_feed.services.urls import slugify, turkish_lower


EMLAK_TITLE_KEYWORDS = ["emlak", "gayrimenkul", "konut"]
DEVELOPMENT_TITLE_KEYWORDS = ["proje", "yapı", "inşaat", "mahalle", "bölge", "altyapı", "ulaşım"]
TITLE_SUFFIX = " - Emlak Piyasasına Etkisi"

HUB_LINKS = ["/karasu-satilik-ev", "/kocaali-satilik-ev"]
INVESTMENT_LINKS = ["/karasu-yatirimlik-gayrimenkul", "/kocaali-yatirimlik-gayrimenkul"]
PRICE_LINKS = ["/karasu-satilik-ev-fiyatlari", "/kocaali-satilik-ev-fiyatlari"]


def _mentions(text: str, keywords: Iterable[str]) -> bool:
    text = turkish_lower(text)
    return any(keyword in text for keyword in keywords)


def enhance_title_for_emlak(title: str) -> str:
    if _mentions(title, EMLAK_TITLE_KEYWORDS):
        return title
    if _mentions(title, DEVELOPMENT_TITLE_KEYWORDS):
        return f"{title}{TITLE_SUFFIX}"
    return title


def rewrite_content(original_content: str, neighborhoods: List[str]) -> str:
    """Append the real estate paragraph unless the text already covers it."""
    content = original_content or ""
    if _mentions(content, ["emlak", "gayrimenkul"]):
        return content

    content += "\n\nBu gelişme, Karasu emlak piyasasını da etkileyebilir. "
    if neighborhoods:
        content += (
            f"Özellikle {', '.join(neighborhoods)} mahallelerinde emlak değerleri "
            "üzerinde etkili olabilir. "
        )
    content += "Emlak yatırımcıları ve alıcılar için bu gelişmeleri takip etmek önemlidir."
    return content


def generate_emlak_analysis(title: str, content: str, neighborhoods: List[str]) -> str:
    analysis = "Bu gelişme, Karasu emlak piyasası açısından önemli sonuçlar doğurabilir. "

    if _mentions(title, ["proje"]) or _mentions(content, ["proje"]):
        analysis += (
            "Yeni projeler, bölgenin emlak değerini artırabilir ve yatırımcılar "
            "için fırsatlar yaratabilir. "
        )

    if _mentions(title, ["altyapı", "ulaşım"]) or _mentions(content, ["yol", "otoyol"]):
        analysis += (
            "Altyapı gelişmeleri, bölgenin erişilebilirliğini artırarak emlak "
            "değerlerini olumlu yönde etkileyebilir. "
        )

    if neighborhoods:
        analysis += (
            f"Özellikle {', '.join(neighborhoods)} mahallelerinde bu gelişmeler "
            "emlak piyasasını etkileyebilir. "
        )

    analysis += (
        "Emlak yatırımcıları ve alıcılar için bu gelişmeleri takip etmek ve uzun "
        "vadeli yatırım stratejilerini buna göre planlamak önemlidir."
    )
    return analysis


def generate_internal_links(neighborhoods: List[str], title: str) -> List[str]:
    links = list(HUB_LINKS)

    for neighborhood in neighborhoods:
        links.append(f"/mahalle/{slugify(neighborhood)}")

    if _mentions(title, ["yatırım", "proje", "gelişme"]):
        links.extend(INVESTMENT_LINKS)

    if _mentions(title, ["fiyat", "değer"]):
        links.extend(PRICE_LINKS)

    # dict.fromkeys keeps first-seen order
    return list(dict.fromkeys(links))


def rewrite_for_real_estate(enriched: EnrichedArticle) -> RewrittenArticle:
    """Rewrite an enriched article for the real estate news section."""
    article = enriched.article
    neighborhoods = list(enriched.related_neighborhoods)
    original_content = article.content or article.description or ""

    return RewrittenArticle(
        title=enhance_title_for_emlak(article.title),
        content=rewrite_content(original_content, neighborhoods),
        emlak_analysis=generate_emlak_analysis(article.title, original_content, neighborhoods),
        related_neighborhoods=tuple(neighborhoods),
        internal_links=tuple(generate_internal_links(neighborhoods, article.title)),
    )
