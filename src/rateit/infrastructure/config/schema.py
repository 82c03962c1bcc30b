"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import AliasChoices, AliasPath, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (omdb/http/search/rating/logging).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="rateit", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # OMDb (YAML section: omdb.*)
    omdb_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "omdb_api_key",
            AliasPath("omdb", "api_key"),
        ),
        description="OMDb API key (sent as the apikey query parameter).",
    )
    omdb_base_url: str = Field(
        default="https://www.omdbapi.com/",
        validation_alias=AliasChoices(
            "omdb_base_url",
            AliasPath("omdb", "base_url"),
        ),
        description="OMDb endpoint.",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request timeout for catalog calls.",
    )
    http_user_agent: str = Field(
        default="RateIt/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_max_retries: int = Field(
        default=2,
        validation_alias=AliasChoices(
            "http_max_retries",
            AliasPath("http", "max_retries"),
        ),
        description="Retries on 429/503 before giving up.",
    )

    # Search (YAML section: search.*)
    search_min_query_length: int = Field(
        default=3,
        validation_alias=AliasChoices(
            "search_min_query_length",
            AliasPath("search", "min_query_length"),
        ),
        description="Queries shorter than this never hit the network.",
    )
    search_debounce_seconds: float = Field(
        default=0.0,
        validation_alias=AliasChoices(
            "search_debounce_seconds",
            AliasPath("search", "debounce_seconds"),
        ),
        description="Quiet period before a search request is issued. 0 = disabled.",
    )

    # Rating widget (YAML section: rating.*)
    rating_max: int = Field(
        default=10,
        validation_alias=AliasChoices(
            "rating_max",
            AliasPath("rating", "max"),
        ),
        description="Highest star rating a user can give.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_max_retries", "search_debounce_seconds")
    @classmethod
    def _validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("search_min_query_length")
    @classmethod
    def _validate_min_query_length(cls, v: int) -> int:
        if v < 3:
            raise ValueError("search_min_query_length must be >= 3")
        return v

    @field_validator("rating_max")
    @classmethod
    def _validate_rating_max(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rating_max must be >= 1")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "omdb": {"api_key": self.omdb_api_key, "base_url": self.omdb_base_url},
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
                "max_retries": self.http_max_retries,
            },
            "search": {
                "min_query_length": self.search_min_query_length,
                "debounce_seconds": self.search_debounce_seconds,
            },
            "rating": {"max": self.rating_max},
            "logging": {"level": self.log_level, "format": self.log_format},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read RATEIT_* variables, converts them
    to a dict of set values and merges that over YAML/defaults before
    validating AppConfig.

    Supported env var examples (flat, explicit):
    - RATEIT_OMDB_API_KEY
    - RATEIT_HTTP_TIMEOUT_SECONDS
    - RATEIT_SEARCH_DEBOUNCE_SECONDS
    - RATEIT_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="RATEIT_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    omdb_api_key: Optional[str] = None
    omdb_base_url: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    http_max_retries: Optional[int] = None

    search_min_query_length: Optional[int] = None
    search_debounce_seconds: Optional[float] = None

    rating_max: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
