"""Shared pytest fixtures for the scraper test suite."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from eventleads.config import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings with no delays and output under a temp dir."""
    return Settings(
        _env_file=None,
        spidra_api_key="test-key",
        spidra_base_url="https://api.spidra.test",
        search_url="https://x/d/search/",
        pages="1",
        output_dir=str(tmp_path / "output"),
        poll_interval=0,
        page_delay=0,
        item_delay=0,
    )


@pytest.fixture
def fake_client():
    """
    Return a factory for scrape clients answering by URL.

    Each value in *responses* is either a payload to return or an exception
    to raise. Unknown URLs raise ``KeyError``.
    """

    def _make(responses: dict[str, Any]) -> AsyncMock:
        async def _scrape(urls: list[str], prompt: str) -> Any:
            value = responses[urls[0]]
            if isinstance(value, Exception):
                raise value
            return value

        client = AsyncMock()
        client.scrape.side_effect = _scrape
        return client

    return _make
