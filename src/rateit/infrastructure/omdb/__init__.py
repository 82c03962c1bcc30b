from .client import DEFAULT_BASE_URL, HttpxOmdbClient

__all__ = ["DEFAULT_BASE_URL", "HttpxOmdbClient"]
