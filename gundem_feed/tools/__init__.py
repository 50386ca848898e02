"""MCP tools for gundem_feed."""
