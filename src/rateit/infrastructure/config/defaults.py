"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "rateit",
    "environment": "dev",
    "omdb": {
        "api_key": None,
        "base_url": "https://www.omdbapi.com/",
    },
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "RateIt/0.1.0",
        "max_retries": 2,
    },
    "search": {
        "min_query_length": 3,
        "debounce_seconds": 0.0,
    },
    "rating": {
        "max": 10,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
}
