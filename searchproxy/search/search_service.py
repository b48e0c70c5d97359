"""
Main search service: one linear pipeline per request.
"""

import asyncio
import time
from datetime import date
from typing import List, Optional, Tuple

from ..providers.embedding_client import EmbeddingClient
from ..providers.index_client import IndexClient
from ..schema.search import QueryRequest, ResultItem, SparseVector
from ..utils.logging import get_logger, log_search_event
from .config import SearchServiceConfig
from .exceptions import ConfigurationError
from .filters import build_metadata_filter
from .hybrid import build_payload, wants_sparse
from .result_mapper import map_matches

logger = get_logger(__name__)


class SearchService:
    """
    Query translation service combining embedding generation, filter translation and
    a single vector index query.
    """

    def __init__(
        self,
        config: SearchServiceConfig,
        embedding_client: Optional[EmbeddingClient] = None,
        index_client: Optional[IndexClient] = None,
    ):
        self.config = config
        self.embedding_client = embedding_client or EmbeddingClient(config.embedding_config)
        self.index_client = index_client or IndexClient(config.index_config)

    def check_configuration(self, query: QueryRequest) -> None:
        """Fail before any upstream call when a required credential or endpoint is missing."""
        missing: List[str] = []
        if not self.config.embedding_config.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.config.index_config.api_key:
            missing.append("PINECONE_API_KEY")
        if not self.config.index_config.base_url:
            missing.append("PINECONE_HOST")
        if (
            wants_sparse(query, self.config)
            and not self.config.embedding_config.pinecone_api_key
            and "PINECONE_API_KEY" not in missing
        ):
            missing.append("PINECONE_API_KEY")

        if missing:
            logger.error("configuration_error", missing=missing)
            raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")

    async def search(self, query: QueryRequest, today: Optional[date] = None) -> List[ResultItem]:
        """
        Run one search.

        Args:
            query: Normalised query from the query builder
            today: UTC day the recency window ends on (defaults to now)

        Returns:
            Result items in index order, at most `query.result_limit` of them
        """
        started = time.perf_counter()
        self.check_configuration(query)
        log_search_event(
            logger,
            "search_started",
            query.text,
            top_k=query.result_limit,
            type=query.content_type_selector or None,
            days=query.recency_window_days,
            hybrid=wants_sparse(query, self.config),
        )

        metadata_filter = build_metadata_filter(query, self.config, today)
        dense, sparse = await self._embed(query)

        payload = build_payload(query, dense, sparse, metadata_filter, self.config.index_config.namespace)
        matches = await self.index_client.query(payload)
        items = map_matches(matches[: query.result_limit])

        log_search_event(
            logger,
            "search_completed",
            query.text,
            results=len(items),
            sparse=payload.sparse_vector is not None,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return items

    async def _embed(self, query: QueryRequest) -> Tuple[List[float], Optional[SparseVector]]:
        # Sparse failures fail the request; there is no dense-only fallback.
        if not wants_sparse(query, self.config):
            return await self.embedding_client.embed_dense(query.text), None

        dense_task = asyncio.ensure_future(self.embedding_client.embed_dense(query.text))
        sparse_task = asyncio.ensure_future(self.embedding_client.embed_sparse(query.exact_phrase))
        try:
            dense, sparse = await asyncio.gather(dense_task, sparse_task)
        except BaseException:
            for task in (dense_task, sparse_task):
                task.cancel()
            await asyncio.gather(dense_task, sparse_task, return_exceptions=True)
            raise
        return dense, sparse

    async def close(self) -> None:
        """Close the provider sessions."""
        await self.embedding_client.close()
        await self.index_client.close()
