"""
Configuration for the outbound providers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"  # 1536-dim cosine
DEFAULT_SPARSE_EMBEDDING_MODEL = "pinecone-sparse-english-v0"


@dataclass(frozen=True)
class EmbeddingConfig:
    """Dense and sparse embedding provider configuration."""

    openai_api_key: Optional[str] = None
    pinecone_api_key: Optional[str] = None
    model: str = DEFAULT_EMBEDDING_MODEL
    sparse_model: str = DEFAULT_SPARSE_EMBEDDING_MODEL
    openai_endpoint: str = "https://api.openai.com/v1/embeddings"
    sparse_endpoint: str = "https://api.pinecone.io/embed"
    pinecone_api_version: str = "2025-01"
    timeout: float = 15.0


@dataclass(frozen=True)
class IndexConfig:
    """Vector index provider configuration."""

    api_key: Optional[str] = None
    host: str = ""
    namespace: Optional[str] = None
    timeout: float = 15.0

    @property
    def base_url(self) -> str:
        return trim_host(self.host)


def trim_host(url: Optional[str]) -> str:
    """Strip trailing slashes from an endpoint base URL."""
    return (url or "").rstrip("/")
