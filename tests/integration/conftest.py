"""Shared fixtures for integration tests.

These tests wire real components (definition registry, search engine,
httpx transport, aggregator) together with mocked HTTP via respx.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def definitions_dir() -> Path:
    """Bundled example definitions shipped at the repository root."""
    return Path(__file__).resolve().parents[2] / "definitions"
