"""Fixtures for MCP client/server integration tests."""

import pytest
from mcp import types
from mcp.shared.memory import create_connected_server_and_client_session

from gundem_feed.server.app import create_mcp_server
from gundem_feed.storage.database import close_database


@pytest.fixture
async def mcp_session():
    """Connect an MCP client session to an in-process server."""
    server = create_mcp_server()

    async with create_connected_server_and_client_session(server._mcp_server) as session:
        yield session, "memory"

    await close_database()


def extract_text_content(result: types.CallToolResult) -> str:
    """Return the text of the first text block in a tool result."""
    for block in result.content:
        if isinstance(block, types.TextContent):
            return block.text
    raise AssertionError(f"No text content in tool result: {result.content}")
