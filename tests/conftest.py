"""Shared pytest configuration."""

import pytest


@pytest.fixture
def anyio_backend():
    """Run anyio-marked tests on asyncio only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_db_path(tmp_path, monkeypatch):
    """Keep any accidental singleton connection out of the user's home directory."""
    monkeypatch.setenv("GUNDEM_FEED_DB_PATH", str(tmp_path / "gundem_feed.db"))
