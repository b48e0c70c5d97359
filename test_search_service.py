"""Tests for the search pipeline with fake providers."""

import asyncio
from datetime import date

import pytest

from conftest import FakeEmbeddingClient, FakeIndexClient, make_config
from searchproxy.providers.config import EmbeddingConfig, IndexConfig
from searchproxy.schema.search import IndexMatch, SparseVector
from searchproxy.search.exceptions import ConfigurationError, UpstreamFailure
from searchproxy.search.query_builder import build_query
from searchproxy.search.search_service import SearchService

TODAY = date(2026, 3, 5)


def run(coro):
    return asyncio.run(coro)


def test_end_to_end_essay_last_week(config, embedding_client, index_client):
    """q=education&type=essay&days=7&topK=5"""
    service = SearchService(config, embedding_client, index_client)
    query = build_query(config, "education", top_k="5", content_type="essay", days="7")

    items = run(service.search(query, today=TODAY))

    assert embedding_client.dense_calls == ["education"]
    assert embedding_client.sparse_calls == []
    body = index_client.last_body
    assert body["topK"] == 5
    assert body["filter"]["final_type"] == {"$in": ["Essay"]}
    assert body["filter"]["date_of_publication"] == {"$gte": "2026-02-26"}
    assert body["namespace"] == "articles"
    assert body["includeMetadata"] is True
    assert len(items) <= 5
    assert [(item.id, item.score) for item in items] == [("a", 0.91), ("b", 0.85)]


def test_results_are_capped_at_result_limit(config, embedding_client):
    index_client = FakeIndexClient([IndexMatch(id=str(i), score=0.5) for i in range(8)])
    service = SearchService(config, embedding_client, index_client)

    items = run(service.search(build_query(config, "education", top_k="3")))
    assert len(items) == 3


def test_hybrid_request_scales_dense_and_attaches_sparse(index_client):
    config = make_config(enable_hybrid=True)
    embedding_client = FakeEmbeddingClient(dense=[1.0, 2.0], sparse=SparseVector(indices=[5], values=[0.7]))
    service = SearchService(config, embedding_client, index_client)

    run(service.search(build_query(config, "education", alpha="0.5", exact=" school choice ")))

    assert embedding_client.dense_calls == ["education"]
    assert embedding_client.sparse_calls == ["school choice"]
    body = index_client.last_body
    assert body["vector"] == [0.5, 1.0]
    assert body["sparseVector"] == {"indices": [5], "values": [0.7]}


def test_hybrid_disabled_never_requests_sparse(config, index_client):
    embedding_client = FakeEmbeddingClient(sparse=SparseVector(indices=[1], values=[1.0]))
    service = SearchService(config, embedding_client, index_client)

    run(service.search(build_query(config, "education", exact="school choice")))

    assert embedding_client.sparse_calls == []
    assert "sparseVector" not in index_client.last_body
    assert index_client.last_body["vector"] == [1.0, 2.0, 4.0]


def test_empty_sparse_sends_dense_alone(index_client):
    config = make_config(enable_hybrid=True)
    embedding_client = FakeEmbeddingClient(dense=[2.0], sparse=None)
    service = SearchService(config, embedding_client, index_client)

    run(service.search(build_query(config, "education", alpha="0.5", exact="phrase")))

    assert embedding_client.sparse_calls == ["phrase"]
    assert index_client.last_body["vector"] == [2.0]
    assert "sparseVector" not in index_client.last_body


def test_sparse_failure_fails_the_whole_request(index_client):
    """No silent fallback to dense-only when the sparse embedding fails."""
    config = make_config(enable_hybrid=True)
    embedding_client = FakeEmbeddingClient()
    embedding_client.sparse_error = UpstreamFailure("Pinecone inference", "Pinecone inference: 500", status=500)
    service = SearchService(config, embedding_client, index_client)

    with pytest.raises(UpstreamFailure):
        run(service.search(build_query(config, "education", exact="phrase")))
    assert index_client.payloads == []


def test_missing_configuration_makes_no_upstream_calls(embedding_client, index_client):
    config = make_config(embedding_config=EmbeddingConfig(), index_config=IndexConfig())
    service = SearchService(config, embedding_client, index_client)

    with pytest.raises(ConfigurationError) as exc_info:
        run(service.search(build_query(config, "education")))

    assert "OPENAI_API_KEY" in exc_info.value.message
    assert "PINECONE_HOST" in exc_info.value.message
    assert embedding_client.dense_calls == []
    assert index_client.payloads == []


def test_close_closes_providers(config, embedding_client, index_client):
    service = SearchService(config, embedding_client, index_client)
    run(service.close())
    assert embedding_client.closed and index_client.closed


class SlowDenseEmbeddingClient(FakeEmbeddingClient):
    def __init__(self):
        super().__init__()
        self.dense_cancelled = False
        self.dense_finished = False

    async def embed_dense(self, text):
        self.dense_calls.append(text)
        try:
            await asyncio.sleep(0.5)
        except asyncio.CancelledError:
            self.dense_cancelled = True
            raise
        self.dense_finished = True
        return list(self.dense)


def test_sparse_failure_cancels_pending_dense_call(index_client):
    config = make_config(enable_hybrid=True)
    embedding_client = SlowDenseEmbeddingClient()
    embedding_client.sparse_error = UpstreamFailure("Pinecone inference", "Pinecone inference: 500", status=500)
    service = SearchService(config, embedding_client, index_client)

    async def scenario():
        with pytest.raises(UpstreamFailure):
            await service.search(build_query(config, "education", exact="phrase"))
        # nothing of the dense call may still be running once search() has raised
        await asyncio.sleep(0.6)

    run(scenario())

    assert embedding_client.dense_cancelled is True
    assert embedding_client.dense_finished is False
