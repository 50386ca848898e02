"""MCP News Tools Integration Tests.

This test suite validates the news MCP tools work correctly when accessed
via an actual MCP client session, testing the complete protocol flow.
"""

import json
import pytest
from unittest.mock import AsyncMock, patch

from gundem_feed.models.schemas import GundemArticle
from .conftest import extract_text_content


# Use anyio instead of pytest-asyncio to match SDK approach
pytestmark = pytest.mark.anyio

NEWS_TOOLS = [
    "get_gundem_articles",
    "import_gundem_news",
    "list_news_articles",
    "get_news_article",
    "publish_news_article",
]


def _article(slug: str, title: str, description: str) -> GundemArticle:
    link = f"https://karasugundem.com/haber/{slug}"
    return GundemArticle(
        title=title,
        link=link,
        description=description,
        content=description,
        pub_date="2024-01-01T00:00:00+00:00",
        guid=link,
        author="Karasu Gündem",
        category=(),
        image=None,
        slug=slug,
    )


async def _call(session, name: str, arguments: dict) -> dict:
    result = await session.call_tool(name, arguments)
    return json.loads(extract_text_content(result))


class TestNewsToolDiscovery:
    """Test news tool discovery functionality."""

    async def test_all_news_tools_discoverable(self, mcp_session):
        """Verify all news tools are registered."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        tool_names = [tool.name for tool in tools_response.tools]

        for expected in NEWS_TOOLS:
            assert expected in tool_names, (
                f"News tool {expected} not found in {tool_names} (transport: {transport})"
            )

    async def test_no_kwargs_or_ctx_in_schemas(self, mcp_session):
        """Test that tool schemas expose neither kwargs nor the injected context."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        for tool in tools_response.tools:
            properties = (tool.inputSchema or {}).get("properties", {})
            assert "kwargs" not in properties, f"{tool.name} exposes kwargs (transport: {transport})"
            assert "ctx" not in properties, f"{tool.name} exposes ctx (transport: {transport})"

    async def test_news_tools_have_descriptions(self, mcp_session):
        """Test that all news tools have descriptions."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        for tool in tools_response.tools:
            if tool.name in NEWS_TOOLS:
                assert tool.description, f"{tool.name} has no description (transport: {transport})"


class TestNewsToolExecution:
    """Test news tools through the MCP protocol."""

    async def test_get_missing_article(self, mcp_session):
        """Unknown slugs come back as an error result, not a protocol error."""
        session, _ = mcp_session

        data = await _call(session, "get_news_article", {"slug": "olmayan-haber"})

        assert data["success"] is False
        assert "not found" in data["error"]

    async def test_get_gundem_articles(self, mcp_session):
        """Enriched feed articles are returned as JSON."""
        session, _ = mcp_session
        articles = [_article("satilik-daire", "Merkezde satılık daire", "Karasu merkez.")]

        with patch(
            "gundem_feed.tools.news_tools.get_latest_gundem_articles",
            AsyncMock(return_value=articles),
        ):
            data = await _call(session, "get_gundem_articles", {"limit": 5})

        assert data["success"] is True
        assert data["count"] == 1
        assert data["articles"][0]["canonical_url"].endswith("/haberler/satilik-daire")

    async def test_import_list_publish_flow(self, mcp_session):
        """Import stores drafts that can then be listed and published."""
        session, _ = mcp_session
        articles = [
            _article("sahil-konut-projesi", "Sahil konut projesi", "Karasu sahil bölgesinde konut."),
            _article("futbol", "Futbol takımı galibiyetle döndü", "Maçta üç gol atıldı."),
        ]

        with patch(
            "gundem_feed.services.importer.get_latest_gundem_articles",
            AsyncMock(return_value=articles),
        ):
            summary = await _call(session, "import_gundem_news", {"limit": 2})

        assert summary["success"] is True
        assert summary["relevant"] == 1
        assert summary["created"] == 1

        listing = await _call(session, "list_news_articles", {})
        assert [a["slug"] for a in listing["articles"]] == ["sahil-konut-projesi"]
        assert listing["articles"][0]["published"] is False

        published = await _call(session, "publish_news_article", {"slug": "sahil-konut-projesi"})
        assert published["article"]["published"] is True

        only_published = await _call(session, "list_news_articles", {"published_only": True})
        assert only_published["count"] == 1
