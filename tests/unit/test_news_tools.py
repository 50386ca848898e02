"""Unit tests for the news MCP tool functions and decorators."""

import pytest
import aiosqlite
from unittest.mock import AsyncMock, patch

from gundem_feed.decorators import exception_handler, tool_logger
from gundem_feed.models.schemas import GundemArticle, ImportSummary
from gundem_feed.storage.database import init_database, upsert_news_article
from gundem_feed.tools.news_tools import (
    feed_cache,
    get_gundem_articles,
    get_news_article,
    import_gundem_news,
    list_news_articles,
    publish_news_article,
)


# Mark all tests as async
pytestmark = pytest.mark.anyio


@pytest.fixture
async def in_memory_db():
    """Create an in-memory database for testing."""
    db = await aiosqlite.connect(":memory:")
    db.row_factory = aiosqlite.Row
    await init_database(db)

    with patch("gundem_feed.storage.database.get_database", AsyncMock(return_value=db)):
        yield db

    await db.close()


def _article(slug: str, title: str) -> GundemArticle:
    link = f"https://karasugundem.com/haber/{slug}"
    return GundemArticle(
        title=title,
        link=link,
        description="",
        content="",
        pub_date="2024-01-01T00:00:00+00:00",
        guid=link,
        author="Karasu Gündem",
        category=("Gündem",),
        image="https://img.karasugundem.com/a.jpg",
        slug=slug,
    )


async def _store(slug: str = "liman-projesi"):
    record, _ = await upsert_news_article({
        "title": "Liman Projesi",
        "slug": slug,
        "source_url": f"https://karasugundem.com/haber/{slug}",
        "source_domain": "karasugundem.com",
        "content": "Karasu limanında çalışmalar sürüyor.",
        "emlak_analysis": "Bu gelişme, Karasu emlak piyasası açısından önemli sonuçlar doğurabilir.",
        "related_neighborhoods": ["karasu", "liman"],
        "seo_keywords": ["karasu emlak", "karasu haberleri"],
    })
    return record


class TestGetGundemArticles:
    """Tests for the get_gundem_articles tool."""

    async def test_returns_enriched_articles(self):
        articles = [
            _article("satilik-villa", "Sahilde satılık villa"),
            _article("futbol", "Futbol takımı galibiyetle döndü"),
        ]

        with patch(
            "gundem_feed.tools.news_tools.get_latest_gundem_articles",
            AsyncMock(return_value=articles),
        ) as mock_fetch:
            result = await get_gundem_articles(limit=2)

        assert result["success"] is True
        assert result["count"] == 2
        first = result["articles"][0]
        assert first["slug"] == "satilik-villa"
        assert first["is_real_estate_related"] is True
        assert first["related_neighborhoods"] == ["sahil"]
        assert first["internal_links"] == [
            {"text": "Sahil emlak ilanları", "href": "/karasu/sahil", "type": "neighborhood"}
        ]
        assert first["hreflang_links"][0] == {"lang": "tr", "url": articles[0].link}
        assert first["category"] == ["Gündem"]
        assert mock_fetch.call_args.kwargs["cache"] is feed_cache

    async def test_real_estate_only(self):
        articles = [
            _article("satilik-villa", "Sahilde satılık villa"),
            _article("futbol", "Futbol takımı galibiyetle döndü"),
        ]

        with patch(
            "gundem_feed.tools.news_tools.get_latest_gundem_articles",
            AsyncMock(return_value=articles),
        ):
            result = await get_gundem_articles(limit=2, real_estate_only=True)

        assert result["count"] == 1
        assert result["articles"][0]["slug"] == "satilik-villa"

    async def test_unreachable_feed_is_empty_not_error(self):
        with patch(
            "gundem_feed.tools.news_tools.get_latest_gundem_articles",
            AsyncMock(return_value=[]),
        ):
            result = await get_gundem_articles()

        assert result == {"success": True, "count": 0, "articles": []}


class TestImportTool:
    """Tests for the import_gundem_news tool."""

    async def test_zero_limit_uses_default(self):
        summary = ImportSummary(fetched=3, relevant=2, created=2)

        with patch(
            "gundem_feed.tools.news_tools.run_import",
            AsyncMock(return_value=summary),
        ) as mock_import:
            result = await import_gundem_news(limit=0)

        assert mock_import.call_args.kwargs["limit"] is None
        assert result["success"] is True
        assert result["created"] == 2
        assert result["errors"] == []

    async def test_explicit_limit_passed_through(self):
        with patch(
            "gundem_feed.tools.news_tools.run_import",
            AsyncMock(return_value=ImportSummary()),
        ) as mock_import:
            await import_gundem_news(limit=5)

        assert mock_import.call_args.kwargs["limit"] == 5


class TestNewsArticleTools:
    """Tests for the stored article tools."""

    async def test_list_news_articles(self, in_memory_db):
        await _store("a")
        await _store("b")

        result = await list_news_articles()

        assert result["success"] is True
        assert result["count"] == 2
        assert "content" not in result["articles"][0]

    async def test_get_news_article(self, in_memory_db):
        await _store()

        result = await get_news_article("liman-projesi")

        assert result["success"] is True
        assert result["article"]["content"] == "Karasu limanında çalışmalar sürüyor."
        assert result["article"]["published"] is False

    async def test_get_news_article_not_found(self, in_memory_db):
        result = await get_news_article("yok")

        assert result["success"] is False
        assert "not found" in result["error"]

    async def test_publish_and_unpublish(self, in_memory_db):
        await _store()

        published = await publish_news_article("liman-projesi")
        assert published["article"]["published"] is True
        assert published["article"]["published_at"] is not None

        draft = await publish_news_article("liman-projesi", published=False)
        assert draft["article"]["published"] is False
        assert draft["article"]["published_at"] is None

    async def test_publish_unknown_slug(self, in_memory_db):
        result = await publish_news_article("yok")

        assert result["success"] is False


class TestDecorators:
    """Tests for the tool decorators."""

    async def test_exception_handler_returns_error_result(self):
        async def broken_tool(slug: str = ""):
            raise RuntimeError("boom")

        result = await exception_handler(broken_tool)(slug="x")

        assert result == {"success": False, "error": "RuntimeError: boom"}

    async def test_decorators_preserve_signature(self):
        decorated = exception_handler(tool_logger(get_news_article, {"name": "test"}))

        assert decorated.__name__ == "get_news_article"
        assert decorated.__wrapped__.__wrapped__ is get_news_article

    async def test_tool_logger_passes_result_through(self):
        async def echo_tool(value: int = 0):
            return {"success": True, "value": value}

        assert await tool_logger(echo_tool)(value=3) == {"success": True, "value": 3}
