"""
Vector index client for similarity queries against a Pinecone index host.
"""

from typing import List

from ..schema.search import IndexMatch, IndexQueryPayload
from ..search.exceptions import ConfigurationError, UnexpectedError
from .config import IndexConfig
from .http import ProviderSession, post_json


class IndexClient:
    """
    Async client for the vector index query endpoint.
    """

    def __init__(self, config: IndexConfig):
        self.config = config
        self.base_url = config.base_url
        self._session = ProviderSession(config.timeout)

    async def query(self, payload: IndexQueryPayload) -> List[IndexMatch]:
        """Execute one similarity query and return the scored matches."""
        if not self.config.api_key:
            raise ConfigurationError("PINECONE_API_KEY is not configured")
        if not self.base_url:
            raise ConfigurationError("PINECONE_HOST is not configured")

        response = await post_json(
            self._session,
            "Pinecone",
            f"{self.base_url}/query",
            {"Api-Key": self.config.api_key},
            payload.to_request_body(),
        )
        if not isinstance(response, dict):
            raise UnexpectedError("Pinecone returned an unexpected query response")

        matches: List[IndexMatch] = []
        for match in response.get("matches") or []:
            if not isinstance(match, dict) or match.get("id") is None or match.get("score") is None:
                raise UnexpectedError("Pinecone returned a match without id or score")
            matches.append(
                IndexMatch(
                    id=str(match["id"]),
                    score=match["score"],
                    metadata=match.get("metadata") or {},
                )
            )
        return matches

    async def close(self) -> None:
        await self._session.close()
