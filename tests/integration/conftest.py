"""Shared fixtures for integration tests.

These tests use real infrastructure components (load_config,
HttpxOmdbClient, RetryTransport) with mocked HTTP via respx.
"""

from __future__ import annotations

import os

import httpx
import pytest
import respx


@pytest.fixture(autouse=True)
def _clean_rateit_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop RATEIT_* variables inherited from the developer's shell."""
    for name in list(os.environ):
        if name.upper().startswith("RATEIT_"):
            monkeypatch.delenv(name)


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
