"""
Embedding client producing dense (OpenAI) and sparse (Pinecone inference) query vectors.
"""

from typing import Any, List, Optional

from ..schema.search import SparseVector
from ..search.exceptions import ConfigurationError, UnexpectedError
from ..utils.logging import get_logger
from .config import EmbeddingConfig
from .http import ProviderSession, post_json

logger = get_logger(__name__)


class EmbeddingClient:
    """
    Client for the dense and sparse embedding providers.
    """

    def __init__(self, config: EmbeddingConfig):
        self.config = config
        self._session = ProviderSession(config.timeout)

    async def embed_dense(self, text: str) -> List[float]:
        """
        Generate the dense embedding of the query text.

        Args:
            text: Query text, already trimmed and non-empty

        Returns:
            Embedding vector of the model's fixed dimensionality
        """
        if not self.config.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

        response = await post_json(
            self._session,
            "OpenAI",
            self.config.openai_endpoint,
            {"Authorization": f"Bearer {self.config.openai_api_key}"},
            {"model": self.config.model, "input": text},
        )
        try:
            embedding = response["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise UnexpectedError("OpenAI returned an unexpected embedding response") from e
        return [float(v) for v in embedding]

    async def embed_sparse(self, text: Optional[str]) -> Optional[SparseVector]:
        """
        Generate the sparse lexical embedding of a phrase.

        Blank input is never sent to the provider and yields None.
        """
        if not text or not text.strip():
            return None
        if not self.config.pinecone_api_key:
            raise ConfigurationError("PINECONE_API_KEY is not configured")

        response = await post_json(
            self._session,
            "Pinecone inference",
            self.config.sparse_endpoint,
            {
                "Api-Key": self.config.pinecone_api_key,
                "X-Pinecone-API-Version": self.config.pinecone_api_version,
            },
            {
                "model": self.config.sparse_model,
                "parameters": {"input_type": "query"},
                "inputs": [{"text": text.strip()}],
            },
        )
        return _parse_sparse(response)

    async def close(self) -> None:
        await self._session.close()


def _parse_sparse(response: Any) -> Optional[SparseVector]:
    try:
        item = response["data"][0]
        indices = item.get("sparse_indices") or []
        values = item.get("sparse_values") or []
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise UnexpectedError("Pinecone inference returned an unexpected sparse response") from e

    if len(indices) != len(values):
        raise UnexpectedError("Pinecone inference returned mismatched sparse indices and values")

    sparse = SparseVector(indices=[int(i) for i in indices], values=[float(v) for v in values])
    if sparse.is_empty():
        logger.warning("sparse_embedding_empty")
        return None
    return sparse
