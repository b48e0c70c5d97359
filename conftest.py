"""Shared fixtures: fake providers and a fully configured search config."""

from typing import Any, Dict, List, Optional

import pytest

from searchproxy.providers.config import EmbeddingConfig, IndexConfig
from searchproxy.schema.search import IndexMatch, IndexQueryPayload, SparseVector
from searchproxy.search.config import SearchServiceConfig


class FakeEmbeddingClient:
    def __init__(self, dense: Optional[List[float]] = None, sparse: Optional[SparseVector] = None):
        self.dense = dense if dense is not None else [1.0, 2.0, 4.0]
        self.sparse = sparse
        self.sparse_error: Optional[Exception] = None
        self.dense_calls: List[str] = []
        self.sparse_calls: List[Optional[str]] = []
        self.closed = False

    async def embed_dense(self, text: str) -> List[float]:
        self.dense_calls.append(text)
        return list(self.dense)

    async def embed_sparse(self, text: Optional[str]) -> Optional[SparseVector]:
        self.sparse_calls.append(text)
        if self.sparse_error is not None:
            raise self.sparse_error
        return self.sparse

    async def close(self) -> None:
        self.closed = True


class FakeIndexClient:
    def __init__(self, matches: Optional[List[IndexMatch]] = None):
        self.matches = matches or []
        self.payloads: List[IndexQueryPayload] = []
        self.closed = False

    @property
    def last_body(self) -> Dict[str, Any]:
        return self.payloads[-1].to_request_body()

    async def query(self, payload: IndexQueryPayload) -> List[IndexMatch]:
        self.payloads.append(payload)
        return list(self.matches)

    async def close(self) -> None:
        self.closed = True


def make_config(**overrides: Any) -> SearchServiceConfig:
    values: Dict[str, Any] = {
        "embedding_config": EmbeddingConfig(openai_api_key="sk-test", pinecone_api_key="pc-test"),
        "index_config": IndexConfig(api_key="pc-test", host="https://index.example.io", namespace="articles"),
    }
    values.update(overrides)
    return SearchServiceConfig(**values)


@pytest.fixture
def config() -> SearchServiceConfig:
    return make_config()


@pytest.fixture
def embedding_client() -> FakeEmbeddingClient:
    return FakeEmbeddingClient()


@pytest.fixture
def index_client() -> FakeIndexClient:
    return FakeIndexClient(
        [
            IndexMatch(id="a", score=0.91, metadata={"Title": "Schools", "final_type": "Essay"}),
            IndexMatch(id="b", score=0.85, metadata={"title": "Teachers", "snippet": "On teaching"}),
        ]
    )
