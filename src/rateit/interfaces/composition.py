"""Composition root: builds the app graph from an AppConfig."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import httpx
import structlog

from rateit.application.orchestrator import RateItApp
from rateit.infrastructure.common.retry_transport import RetryTransport
from rateit.infrastructure.config import AppConfig, load_config
from rateit.infrastructure.logging.setup import configure_logging
from rateit.infrastructure.omdb.client import HttpxOmdbClient

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    transport = RetryTransport(
        httpx.AsyncHTTPTransport(),
        max_retries=config.http_max_retries,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=config.http_timeout_seconds,
        headers={"User-Agent": config.http_user_agent},
    )


def build_app(config: AppConfig, http_client: httpx.AsyncClient) -> RateItApp:
    """Wire the OMDb client and the orchestrator.

    Raises:
        ValueError: if no OMDb API key is configured.
    """
    if not config.omdb_api_key:
        raise ValueError("omdb_api_key is not configured (set RATEIT_OMDB_API_KEY)")

    catalog = HttpxOmdbClient(
        api_key=config.omdb_api_key,
        http_client=http_client,
        base_url=config.omdb_base_url,
    )
    return RateItApp(
        catalog,
        min_query_length=config.search_min_query_length,
        debounce_seconds=config.search_debounce_seconds,
        rating_max=config.rating_max,
    )


@asynccontextmanager
async def open_app(config: AppConfig) -> AsyncIterator[RateItApp]:
    """Build the app and own the httpx client for its lifetime."""
    http_client = build_http_client(config)
    try:
        app = build_app(config, http_client)
    except Exception:
        await http_client.aclose()
        raise

    log.info("app_started", app_name=config.app_name, environment=config.environment)
    try:
        yield app
    finally:
        await app.aclose()
        await http_client.aclose()
        log.info("app_stopped")


def bootstrap(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load config exactly once and configure logging from it."""
    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        overrides=overrides,
    )
    configure_logging(config)
    return config


@asynccontextmanager
async def open_app_from_env(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AsyncIterator[RateItApp]:
    """Process entry point for embedders: bootstrap, then :func:`open_app`."""
    config = bootstrap(
        config_path=config_path,
        dotenv_path=dotenv_path,
        overrides=overrides,
    )
    async with open_app(config) as app:
        yield app
