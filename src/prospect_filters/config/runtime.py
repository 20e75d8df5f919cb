"""Pydantic-based runtime settings.

Loads from environment variables (with optional .env file).
Invalid values fail fast when settings are first built.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from ..domain.dsl_validator import RangePolicy


class CacheBackend(str, Enum):
    memory = "memory"
    redis = "redis"


class RuntimeSettings(BaseSettings):
    """All configuration for the filter compiler, validated at startup."""

    model_config = {"env_prefix": "", "env_file": ".env", "env_file_encoding": "utf-8"}

    # --- Elasticsearch ---
    elasticsearch_url: str = Field(
        default="http://localhost:9200",
        validation_alias=AliasChoices("ELASTICSEARCH_URL", "ES_HOST"),
        description="Elasticsearch endpoint",
    )
    elasticsearch_api_key: str | None = Field(default=None, description="Optional API key for Elasticsearch")
    contact_index: str = Field(default="contacts", description="Index holding contact documents")
    company_index: str = Field(default="companies", description="Index holding company documents")
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout")

    # --- Registry ---
    registry_path: str | None = Field(
        default=None,
        description="JSON file with filter definitions; the bundled registry is used when unset",
    )
    registry_ttl_seconds: int = Field(default=60 * 60, ge=0, description="How long a loaded catalog is reused")

    # --- Value cache ---
    cache_backend: CacheBackend = Field(default=CacheBackend.memory, description="'memory' or 'redis'")
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis URL for the value cache")
    cache_key_prefix: str = Field(default="prospect_filters:", description="Prefix for Redis cache keys")
    values_ttl_predefined_seconds: int = Field(default=24 * 60 * 60, ge=0)
    values_ttl_specialized_seconds: int = Field(default=24 * 60 * 60, ge=0)
    values_ttl_elasticsearch_seconds: int = Field(default=30 * 60, ge=0)
    value_bucket_size: int = Field(default=10_000, ge=1, le=65_536, description="Max distinct values per aggregation")

    # --- Validation policy ---
    range_policy: RangePolicy = Field(
        default=RangePolicy.report,
        description="Range-mode filter without a range: 'report' keeps it, 'drop' removes it",
    )
    strict_validation: bool = Field(default=False, description="Reject any DSL with validation errors")

    # --- Limits ---
    max_per_page: int = Field(default=100, ge=1, le=1000, description="Maximum page size for searches")

    # --- Auth / ops ---
    require_engine_key: bool = Field(default=False, description="If True, MCP tools require MCP_ENGINE_KEY env")
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return the singleton RuntimeSettings (cached after first call)."""
    return RuntimeSettings()
