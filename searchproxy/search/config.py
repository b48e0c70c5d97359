"""
Configuration management for the search proxy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..providers.config import (
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_SPARSE_EMBEDDING_MODEL,
    EmbeddingConfig,
    IndexConfig,
    trim_host,
)


class ContentTypeMode(str, Enum):
    """How the `type` request parameter is interpreted."""

    TOKENS = "tokens"  # "essay", "podcast,video", "all"
    LABELS = "labels"  # "All Content Types", "Essays Only", "Podcasts/Videos Only"


class RecencyStrategy(str, Enum):
    """How a recency window becomes a date predicate."""

    GTE = "gte"  # stored dates are strict YYYY-MM-DD
    ENUMERATE = "enumerate"  # stored dates use mixed literal formats


class ProxySettings(BaseSettings):
    """
    Raw settings loaded from environment variables and an optional .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # Provider credentials
    openai_api_key: Optional[str] = None
    pinecone_api_key: Optional[str] = None
    pinecone_host: str = ""
    pinecone_namespace: str = ""

    # Inbound caller credential (None disables the check)
    search_api_key: Optional[str] = None

    # Models
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    sparse_embedding_model: str = DEFAULT_SPARSE_EMBEDDING_MODEL

    # Query behavior
    enable_hybrid: bool = False
    content_type_mode: ContentTypeMode = ContentTypeMode.TOKENS
    recency_strategy: RecencyStrategy = RecencyStrategy.GTE
    max_top_k: int = Field(50, ge=1, le=100)
    default_top_k: int = Field(10, ge=1)
    default_alpha: float = Field(0.8, ge=0.0, le=1.0)

    # Upstream behavior
    upstream_timeout_seconds: float = Field(15.0, gt=0)
    expose_upstream_detail: bool = True

    # HTTP surface
    cors_origins: str = "*"
    port: int = Field(3000, ge=1, le=65535)

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    json_logs: bool = Field(True, description="Whether to output JSON format logs")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("content_type_mode", "recency_strategy", mode="before")
    @classmethod
    def normalize_choice(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


@dataclass(frozen=True)
class SearchServiceConfig:
    """Process-wide search configuration, built once at startup and never mutated."""

    embedding_config: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    index_config: IndexConfig = field(default_factory=IndexConfig)

    # Inbound caller credential
    api_key: Optional[str] = None

    # Query behavior
    enable_hybrid: bool = False
    content_type_mode: ContentTypeMode = ContentTypeMode.TOKENS
    recency_strategy: RecencyStrategy = RecencyStrategy.GTE
    max_top_k: int = 50
    default_top_k: int = 10
    default_alpha: float = 0.8

    # Error reporting
    expose_upstream_detail: bool = True

    # HTTP surface
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 3000
    log_level: str = "INFO"
    json_logs: bool = True

    @classmethod
    def from_settings(cls, settings: ProxySettings) -> "SearchServiceConfig":
        timeout = settings.upstream_timeout_seconds
        return cls(
            embedding_config=EmbeddingConfig(
                openai_api_key=settings.openai_api_key or None,
                pinecone_api_key=settings.pinecone_api_key or None,
                model=settings.embedding_model,
                sparse_model=settings.sparse_embedding_model,
                timeout=timeout,
            ),
            index_config=IndexConfig(
                api_key=settings.pinecone_api_key or None,
                host=trim_host(settings.pinecone_host),
                namespace=settings.pinecone_namespace or None,
                timeout=timeout,
            ),
            api_key=settings.search_api_key or None,
            enable_hybrid=settings.enable_hybrid,
            content_type_mode=settings.content_type_mode,
            recency_strategy=settings.recency_strategy,
            max_top_k=settings.max_top_k,
            default_top_k=min(settings.default_top_k, settings.max_top_k),
            default_alpha=settings.default_alpha,
            expose_upstream_detail=settings.expose_upstream_detail,
            cors_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()] or ["*"],
            port=settings.port,
            log_level=settings.log_level,
            json_logs=settings.json_logs,
        )

    @classmethod
    def from_environment(cls) -> "SearchServiceConfig":
        """Create configuration from environment variables."""
        return cls.from_settings(ProxySettings())
